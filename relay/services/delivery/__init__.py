from relay.services.delivery.base import DeliveryAck, DeliveryProvider, MessageEncoding
from relay.services.delivery.vonage import VonageDeliveryProvider

__all__ = ["DeliveryAck", "DeliveryProvider", "MessageEncoding", "VonageDeliveryProvider"]
