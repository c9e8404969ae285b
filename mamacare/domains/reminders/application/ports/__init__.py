# Application Ports (Interfaces)
from .push_port import DEVICE_NOT_REGISTERED, IPushProvider, PushMessage, PushReceipt, PushTicket
from .repository_ports import (
    IAppointmentRepository,
    IPatientRepository,
    IPreferenceStore,
    IRecipientRepository,
)

__all__ = [
    "DEVICE_NOT_REGISTERED",
    "IAppointmentRepository",
    "IPatientRepository",
    "IPreferenceStore",
    "IPushProvider",
    "IRecipientRepository",
    "PushMessage",
    "PushReceipt",
    "PushTicket",
]
