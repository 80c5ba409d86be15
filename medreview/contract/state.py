"""Records kept by the review contract."""

from typing import List, NamedTuple, Tuple

from medreview.transaction.types import AddressValue, HandleValue


class Doctor:
    """Registry entry of a doctor. Only the review counter changes after registration."""

    def __init__(self, doctor_id: int, name: str, specialty: str, clinic: str, registration_time: int):
        self.__doctor_id = doctor_id
        self.__name = name
        self.__specialty = specialty
        self.__clinic = clinic
        self.__registration_time = registration_time
        self.is_registered = True
        self.total_reviews = 0
        self.review_ids: List[int] = []

    @property
    def doctor_id(self) -> int:
        return self.__doctor_id

    @property
    def name(self) -> str:
        return self.__name

    @property
    def specialty(self) -> str:
        return self.__specialty

    @property
    def clinic(self) -> str:
        return self.__clinic

    @property
    def registration_time(self) -> int:
        return self.__registration_time

    def info(self) -> 'DoctorInfo':
        return DoctorInfo(self.name, self.specialty, self.clinic, self.registration_time, self.total_reviews,
                          self.is_registered)


class DoctorInfo(NamedTuple):
    name: str
    specialty: str
    clinic: str
    registration_time: int
    total_reviews: int
    is_registered: bool


class Review(NamedTuple):
    doctor_id: int
    rating: HandleValue
    professionalism: HandleValue
    communication: HandleValue
    wait_time: HandleValue
    comment: str
    reviewer: AddressValue
    timestamp: int

    @property
    def handles(self) -> Tuple[HandleValue, HandleValue, HandleValue, HandleValue]:
        """Encrypted ratings in dimension order."""
        return self.rating, self.professionalism, self.communication, self.wait_time


class AggregatedRating(NamedTuple):
    average_rating: int = 0
    average_professionalism: int = 0
    average_communication: int = 0
    average_wait_time: int = 0
    total_reviews: int = 0
    last_updated: int = 0
    is_revealed: bool = False


class PendingAggregation(NamedTuple):
    """The aggregation which currently awaits its decryption result."""
    doctor_id: int
    request_id: int
    review_count: int
    requested_at: int
    expires_at: int

    def is_expired(self, now: int) -> bool:
        return now >= self.expires_at
