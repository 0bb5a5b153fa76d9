# models.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Type, Union

CENTS = Decimal("0.01")

Money = Union[Decimal, int, float, str]


class HotelError(Exception):
    pass


class InvalidArgument(HotelError, ValueError):
    """Raised when a computation is handed an argument it cannot price."""


class InvalidDateRange(HotelError, ValueError):
    """Raised when a stay does not end strictly after it starts."""


def to_money(value: Money) -> Decimal:
    # go through str() so 1.10 stays 1.10 and not its binary approximation
    if isinstance(value, bool):
        raise InvalidArgument(f"not a monetary amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        raise InvalidArgument(f"not a monetary amount: {value!r}")
    if not amount.is_finite():
        raise InvalidArgument(f"not a monetary amount: {value!r}")
    return amount


class BillingPolicy(ABC):
    """Pricing rule turning a nightly rate and a night count into a stay charge."""

    name = ""
    multiplier = Decimal("1")

    @abstractmethod
    def compute(self, base_rate: Money, nights: int) -> Decimal:
        pass

    def _charge(self, base_rate: Money, nights: int) -> Decimal:
        amount = to_money(base_rate) * nights * self.multiplier
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f"{type(self).__name__}()"


class RegularBilling(BillingPolicy):
    name = "Regular"

    def compute(self, base_rate: Money, nights: int) -> Decimal:
        return self._charge(base_rate, nights)


class PremiumBilling(BillingPolicy):
    name = "Premium"
    multiplier = Decimal("1.10")

    def compute(self, base_rate: Money, nights: int) -> Decimal:
        return self._charge(base_rate, nights)


class CorporateBilling(BillingPolicy):
    name = "Corporate"
    multiplier = Decimal("0.85")

    def compute(self, base_rate: Money, nights: int) -> Decimal:
        return self._charge(base_rate, nights)


BILLING_POLICIES: Dict[str, Type[BillingPolicy]] = {
    cls.name.lower(): cls for cls in (RegularBilling, PremiumBilling, CorporateBilling)
}


def billing_policy_for(name: str) -> BillingPolicy:
    try:
        return BILLING_POLICIES[str(name).strip().lower()]()
    except KeyError:
        raise InvalidArgument(f"unknown billing policy: {name!r}")


class RoomCategory(Enum):
    SINGLE = "Single"
    DOUBLE = "Double"
    DELUXE = "Deluxe"
    SUITE = "Suite"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def max_occupancy(self) -> int:
        return ROOM_CAPACITY[self]

    @classmethod
    def from_name(cls, name: str) -> "RoomCategory":
        for category in cls:
            if category.value.lower() == str(name).strip().lower():
                return category
        raise InvalidArgument(f"unknown room category: {name!r}")


ROOM_CAPACITY = {
    RoomCategory.SINGLE: 1,
    RoomCategory.DOUBLE: 2,
    RoomCategory.DELUXE: 4,
    RoomCategory.SUITE: 6,
}


@dataclass
class Room:
    room_number: int
    category: RoomCategory
    rate: Decimal
    policy: BillingPolicy
    max_guests: int
    available: bool = True   # False while a reservation holds the room

    def __post_init__(self):
        self.rate = to_money(self.rate)

    @property
    def category_name(self) -> str:
        return self.category.display_name

    @property
    def policy_name(self) -> str:
        return self.policy.name

    def set_rate(self, rate: Money):
        self.rate = to_money(rate)

    def set_policy(self, policy: BillingPolicy):
        self.policy = policy

    def compute_bill(self, nights: int) -> Decimal:
        if nights <= 0:
            raise InvalidArgument(f"number of nights must be positive, got {nights}")
        return self.policy.compute(self.rate, nights)


@dataclass
class Reservation:
    reservation_id: int
    name: str
    contact: str
    room_number: int
    check_in: str          # DD/MM/YYYY
    check_out: str         # DD/MM/YYYY
    guests: int

    def update_guests(self, guests: int):
        self.guests = guests

    def update_dates(self, check_in: str, check_out: str):
        self.check_in = check_in
        self.check_out = check_out

    def update_room_number(self, room_number: int):
        self.room_number = room_number


@dataclass
class ReservationDetails:
    reservation: Reservation
    room: Room
    nights: int
    bill: Decimal
