"""Events emitted by the review contract, consumed by indexers and front ends."""

from typing import Callable, List, NamedTuple, Type, TypeVar, Union

from medreview import my_logging
from medreview.transaction.types import AddressValue, Value


class DoctorRegistered(NamedTuple):
    doctor_id: int
    name: str
    specialty: str


class ReviewSubmitted(NamedTuple):
    review_id: int
    doctor_id: int
    reviewer: AddressValue


class AggregationRequested(NamedTuple):
    doctor_id: int
    total_reviews: int
    request_id: int


class RatingRevealed(NamedTuple):
    doctor_id: int
    average_rating: int
    total_reviews: int


class AggregationAbandoned(NamedTuple):
    doctor_id: int
    request_id: int


class OperatorUpdated(NamedTuple):
    previous_operator: AddressValue
    new_operator: AddressValue


Event = Union[DoctorRegistered, ReviewSubmitted, AggregationRequested, RatingRevealed, AggregationAbandoned,
              OperatorUpdated]
E = TypeVar('E')


class EventLog:
    """Append-only list of emitted events, listeners are notified in emission order."""

    def __init__(self):
        self.__events: List[Event] = []
        self.__listeners: List[Callable[[Event], None]] = []

    def emit(self, event: Event):
        self.__events.append(event)
        fields = {k: Value.unwrap_values(v) for k, v in event._asdict().items()}
        my_logging.info(f'Event {type(event).__name__}{fields}')
        my_logging.data('event', {'type': type(event).__name__, **fields})
        for listener in list(self.__listeners):
            # A failing consumer must not abort the emitting transaction
            try:
                listener(event)
            except Exception:
                my_logging.exception(f'Event listener {listener!r} failed on {type(event).__name__}')

    def subscribe(self, listener: Callable[[Event], None]):
        self.__listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Event], None]):
        self.__listeners.remove(listener)

    def filter(self, event_type: Type[E]) -> List[E]:
        return [e for e in self.__events if isinstance(e, event_type)]

    def last(self) -> Event:
        return self.__events[-1]

    def __iter__(self):
        return iter(list(self.__events))

    def __len__(self):
        return len(self.__events)
