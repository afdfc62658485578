"""Outbound messaging. Only a no-op producer exists today."""

from accounts.messaging.producer import SEND_OK, MessageProducer, NullMessageProducer, SendResult

__all__ = ["SEND_OK", "MessageProducer", "NullMessageProducer", "SendResult"]
