"""
Chip stacks for purses, bets, and the house bank.

Money only ever moves between stacks: `add_chips` drains its source and
`remove_chips` hands back a new stack, so the total held across a table
stays constant apart from house payouts.
"""


class InsufficientFundsError(Exception):
    """Raised when more chips are requested than a stack holds."""

    pass


class ChipStack:
    """
    A non-negative amount of chips.

    >>> purse = ChipStack(100)
    >>> bet = purse.remove_chips(25)
    >>> purse.value, bet.value
    (75, 25)
    """

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        if value < 0:
            raise ValueError(f"Chip stack cannot be negative: {value}")
        self._value = int(value)

    @property
    def value(self) -> int:
        return self._value

    def remove_chips(self, amount: int) -> "ChipStack":
        """
        Split `amount` chips off into a new stack.

        :raises InsufficientFundsError: if the stack holds less than `amount`
        """
        if amount < 0:
            raise ValueError(f"Cannot remove a negative amount: {amount}")
        if amount > self._value:
            raise InsufficientFundsError(
                f"Cannot remove {amount} chips from a stack of {self._value}"
            )
        self._value -= amount
        return ChipStack(amount)

    def add_chips(self, other: "ChipStack") -> None:
        """Move every chip of `other` onto this stack, leaving `other` empty."""
        if other is self:
            return
        self._value += other._value
        other._value = 0

    def __add__(self, other: "ChipStack") -> "ChipStack":
        if not isinstance(other, ChipStack):
            return NotImplemented
        return ChipStack(self._value + other._value)

    def __eq__(self, other):
        if isinstance(other, ChipStack):
            return self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __bool__(self) -> bool:
        return self._value > 0

    def __repr__(self) -> str:
        return f"ChipStack({self._value})"

    def __str__(self) -> str:
        return str(self._value)
