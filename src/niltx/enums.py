from enum import Enum


class TransactionFlag(Enum):
    """Classification tags attached to a transaction by the node"""

    internal = 'Internal'
    external = 'External'
    deploy = 'Deploy'
    refund = 'Refund'
    bounce = 'Bounce'
    response = 'Response'
