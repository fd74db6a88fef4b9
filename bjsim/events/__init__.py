"""
Event system for the blackjack table.
"""

from bjsim.events.emitter import EventEmitter, EventPriority, TableEventType

__all__ = ["EventEmitter", "EventPriority", "TableEventType"]
