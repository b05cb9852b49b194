"""Import all models so Base.metadata knows every table."""
from messenger_service.infrastructure.db.models.conversation import ConversationModel
from messenger_service.infrastructure.db.models.message import MessageModel
from messenger_service.infrastructure.db.models.participant import ParticipantModel
from messenger_service.infrastructure.db.models.read_state import ReadStateModel
from messenger_service.infrastructure.db.models.user import UserModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "ParticipantModel",
    "ReadStateModel",
    "UserModel",
]
