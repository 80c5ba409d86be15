"""
Anonymous medical review contract.

Reviewers submit ratings for registered doctors. The ratings are only stored as encrypted handles of the decryption
gateway. Once enough reviews were collected, the operator requests an aggregation, which issues a single batched
decryption request for all rating handles of the doctor. The gateway later delivers the signed cleartexts to
:py:meth:`AnonymousMedicalReview.on_ratings_decrypted`, which reveals the per-dimension averages.

At most one aggregation may await its decryption result at any time.
"""

import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Set, Tuple, Iterator

from eth_abi import decode

from medreview import my_logging
from medreview.config import cfg, mr_print
from medreview.contract.events import EventLog, DoctorRegistered, ReviewSubmitted, AggregationRequested, \
    RatingRevealed, AggregationAbandoned, OperatorUpdated
from medreview.contract.state import Doctor, DoctorInfo, Review, AggregatedRating, PendingAggregation
from medreview.errors.exceptions import NotAuthorizedError, InvalidDoctorError, InvalidReviewError, \
    RatingOutOfRangeError, CommentTooLongError, InvalidAddressError, DoctorNotRegisteredError, AlreadyReviewedError, \
    AggregationInProgressError, InsufficientReviewsError, CooldownActiveError, NoPendingAggregationError, \
    AggregationNotExpiredError, InvalidDecryptionProofError, UnknownDecryptionRequestError, MalformedCleartextsError
from medreview.my_logging.log_context import log_context
from medreview.transaction.interface import FheGatewayInterface, ReviewLedgerInterface
from medreview.transaction.runtime import Runtime
from medreview.transaction.types import AddressValue, MsgStruct, BlockStruct
from medreview.utils.timer import time_measure


class AnonymousMedicalReview:
    def __init__(self, operator: AddressValue, *,
                 gateway: Optional[FheGatewayInterface] = None, ledger: Optional[ReviewLedgerInterface] = None):
        if operator.is_zero:
            raise InvalidAddressError('Operator must not be the zero address')
        self._ledger = Runtime.blockchain() if ledger is None else ledger
        self._gateway = Runtime.gateway() if gateway is None else gateway
        self.__address = self._ledger.new_contract_address(operator)
        self.__operator = operator
        self._lock = threading.RLock()

        self.__doctors: Dict[int, Doctor] = {}
        self.__ratings: Dict[int, AggregatedRating] = {}
        self.__reviews: Dict[int, Review] = {}
        self.__has_reviewed: Set[Tuple[AddressValue, int]] = set()
        self.__pending: Optional[PendingAggregation] = None
        self.__request_targets: Dict[int, int] = {}

        self.events = EventLog()
        self.deployed_at = self._ledger.timestamp
        self._ledger.mine()
        my_logging.info(f'Deployed review contract at {self.__address} (operator {operator})')

    @property
    def address(self) -> AddressValue:
        return self.__address

    @property
    def operator(self) -> AddressValue:
        return self.__operator

    @property
    def gateway(self) -> FheGatewayInterface:
        return self._gateway

    @property
    def ledger(self) -> ReviewLedgerInterface:
        return self._ledger

    @contextmanager
    def _transaction(self, name: str, user: AddressValue) -> Iterator[Tuple[MsgStruct, BlockStruct]]:
        """
        Execute the body as one atomic operation of user.

        Entry points must raise before their first state change if they reject the operation.
        """
        with self._lock:
            with log_context(name):
                msg, block = self._ledger.get_special_variables(user)
                my_logging.debug(f'{name} called by {user} in block {block.number}')
                yield msg, block
                self._ledger.mine()

    def _only_operator(self, msg: MsgStruct):
        if msg.sender != self.__operator:
            raise NotAuthorizedError()

    def _doctor(self, doctor_id: int) -> Doctor:
        if not isinstance(doctor_id, int) or isinstance(doctor_id, bool) or doctor_id not in self.__doctors:
            raise InvalidDoctorError(doctor_id)
        return self.__doctors[doctor_id]

    # Operator administration

    def register_doctor(self, name: str, specialty: str, clinic: str, *, user: AddressValue) -> int:
        with self._transaction('register_doctor', user) as (msg, block):
            self._only_operator(msg)

            doctor_id = len(self.__doctors) + 1
            self.__doctors[doctor_id] = Doctor(doctor_id, name, specialty, clinic, block.timestamp)
            self.__ratings[doctor_id] = AggregatedRating()
            self.events.emit(DoctorRegistered(doctor_id, name, specialty))
            return doctor_id

    def update_operator(self, new_operator: AddressValue, *, user: AddressValue):
        with self._transaction('update_operator', user) as (msg, _):
            self._only_operator(msg)
            if new_operator.is_zero:
                raise InvalidAddressError()

            previous, self.__operator = self.__operator, new_operator
            self.events.emit(OperatorUpdated(previous, new_operator))

    # Reviews

    def submit_review(self, doctor_id: int, rating: int, professionalism: int, communication: int, wait_time: int,
                      comment: str, *, user: AddressValue) -> int:
        """
        Store an anonymous review of a doctor.

        Every rating must lie in [cfg.min_rating, cfg.max_rating]. The ratings are encrypted by the gateway,
        both this contract and the reviewer are granted access to the resulting handles.

        :return: id of the new review
        """
        with self._transaction('submit_review', user) as (msg, block):
            doctor = self._doctor(doctor_id)
            if not doctor.is_registered:
                raise DoctorNotRegisteredError(doctor_id)
            ratings = (rating, professionalism, communication, wait_time)
            for dimension, value in zip(cfg.rating_dimensions, ratings):
                if not isinstance(value, int) or isinstance(value, bool) or not cfg.min_rating <= value <= cfg.max_rating:
                    raise RatingOutOfRangeError(dimension, value, cfg.min_rating, cfg.max_rating)
            if len(comment) > cfg.max_comment_length:
                raise CommentTooLongError(len(comment), cfg.max_comment_length)
            if (msg.sender, doctor_id) in self.__has_reviewed:
                raise AlreadyReviewedError(doctor_id)

            with time_measure('encrypt_review'):
                handles = [self._gateway.encrypt(value, self.__address) for value in ratings]
            for handle in handles:
                self._gateway.allow(handle, msg.sender)

            review_id = len(self.__reviews) + 1
            self.__reviews[review_id] = Review(doctor_id, *handles, comment, msg.sender, block.timestamp)
            doctor.review_ids.append(review_id)
            doctor.total_reviews += 1
            self.__has_reviewed.add((msg.sender, doctor_id))

            self.events.emit(ReviewSubmitted(review_id, doctor_id, msg.sender))
            return review_id

    # Aggregation

    def _check_eligible(self, doctor: Doctor, now: int):
        if self.__pending is not None:
            raise AggregationInProgressError(self.__pending.doctor_id)
        if doctor.total_reviews < cfg.aggregation_min_reviews:
            raise InsufficientReviewsError(doctor.doctor_id, doctor.total_reviews, cfg.aggregation_min_reviews)
        current = self.__ratings[doctor.doctor_id]
        if current.is_revealed and now < current.last_updated + cfg.aggregation_cooldown:
            raise CooldownActiveError(doctor.doctor_id, current.last_updated + cfg.aggregation_cooldown)

    def can_request_aggregation(self, doctor_id: int) -> bool:
        """Return whether request_aggregation(doctor_id) would currently be accepted for the operator."""
        with self._lock:
            try:
                self._check_eligible(self._doctor(doctor_id), self._ledger.timestamp)
            except (InvalidDoctorError, AggregationInProgressError, InsufficientReviewsError, CooldownActiveError):
                return False
            return True

    def request_aggregation(self, doctor_id: int, *, user: AddressValue) -> int:
        """
        Request decryption of all ratings of a doctor.

        The handles are ordered per review (in submission order), and within a review by rating dimension.

        :return: id of the decryption request
        """
        with self._transaction('request_aggregation', user) as (msg, block):
            self._only_operator(msg)
            doctor = self._doctor(doctor_id)
            self._check_eligible(doctor, block.timestamp)

            handles = [h for review_id in doctor.review_ids for h in self.__reviews[review_id].handles]
            request_id = self._gateway.request_decryption(handles, self._deliver_decryption, self.__address)

            self.__pending = PendingAggregation(doctor_id, request_id, doctor.total_reviews, block.timestamp,
                                                block.timestamp + cfg.aggregation_request_timeout)
            self.__request_targets[request_id] = doctor_id
            mr_print(f'Requested aggregation of {doctor.total_reviews} reviews for doctor {doctor_id} '
                     f'(request {request_id})')
            self.events.emit(AggregationRequested(doctor_id, doctor.total_reviews, request_id))
            return request_id

    def _deliver_decryption(self, request_id: int, cleartexts: bytes, proof: bytes):
        self.on_ratings_decrypted(request_id, cleartexts, proof, user=self._gateway.address)

    def on_ratings_decrypted(self, request_id: int, cleartexts: bytes, proof: bytes, *,
                             user: Optional[AddressValue] = None):
        """
        Reveal the averages of the doctor whose aggregation issued request_id.

        :param cleartexts: abi encoded uint256 ratings, in the order of the request handles
        :param proof: gateway signature over (request_id, cleartexts)
        :raise InvalidDecryptionProofError: if the gateway does not accept proof
        :raise UnknownDecryptionRequestError: if request_id is not the pending aggregation request
        :raise MalformedCleartextsError: if cleartexts are not a non-empty sequence of complete reviews
        """
        user = self._gateway.address if user is None else user
        with self._transaction('on_ratings_decrypted', user) as (_, block):
            if not self._gateway.verify(request_id, cleartexts, proof):
                raise InvalidDecryptionProofError(request_id)
            doctor_id = self.__request_targets.get(request_id)
            if doctor_id is None or self.__pending is None or self.__pending.request_id != request_id:
                raise UnknownDecryptionRequestError(request_id)

            values = self._decode_ratings(cleartexts)
            dims = len(cfg.rating_dimensions)
            count = len(values) // dims
            averages = [sum(values[d::dims]) // count for d in range(dims)]

            self.__ratings[doctor_id] = AggregatedRating(*averages, total_reviews=count,
                                                         last_updated=block.timestamp, is_revealed=True)
            self.__pending = None
            del self.__request_targets[request_id]
            my_logging.data('revealed_rating', {'doctor_id': doctor_id, 'averages': averages, 'reviews': count})
            self.events.emit(RatingRevealed(doctor_id, averages[0], count))

    @staticmethod
    def _decode_ratings(cleartexts: bytes) -> List[int]:
        word = cfg.cleartext_word_size
        dims = len(cfg.rating_dimensions)
        if not isinstance(cleartexts, (bytes, bytearray)) or not cleartexts or len(cleartexts) % word != 0:
            raise MalformedCleartextsError(f'Cleartexts must be a non-empty sequence of {word} byte words')
        n = len(cleartexts) // word
        if n % dims != 0:
            raise MalformedCleartextsError(f'Expected a multiple of {dims} ratings, got {n}')
        return list(decode(['uint256'] * n, bytes(cleartexts)))

    def abandon_aggregation(self, *, user: AddressValue):
        """
        Give up on a pending aggregation whose decryption result did not arrive in time.

        Cancels the decryption request, a later delivery for it is rejected.
        """
        with self._transaction('abandon_aggregation', user) as (msg, block):
            self._only_operator(msg)
            pending = self.__pending
            if pending is None:
                raise NoPendingAggregationError()
            if not pending.is_expired(block.timestamp):
                raise AggregationNotExpiredError(pending.request_id, pending.expires_at)

            if pending.request_id in self._gateway.pending_requests():
                self._gateway.cancel(pending.request_id)
            self.__pending = None
            del self.__request_targets[pending.request_id]
            my_logging.warning(f'Abandoned aggregation request {pending.request_id} for doctor {pending.doctor_id}')
            self.events.emit(AggregationAbandoned(pending.doctor_id, pending.request_id))

    # Queries

    def get_doctor_info(self, doctor_id: int) -> DoctorInfo:
        return self._doctor(doctor_id).info()

    def get_doctor_rating(self, doctor_id: int) -> AggregatedRating:
        self._doctor(doctor_id)
        return self.__ratings[doctor_id]

    def get_doctor_review_count(self, doctor_id: int) -> int:
        return self._doctor(doctor_id).total_reviews

    def get_doctor_review_ids(self, doctor_id: int) -> List[int]:
        return list(self._doctor(doctor_id).review_ids)

    def get_review_status(self, reviewer: AddressValue, doctor_id: int) -> bool:
        return (reviewer, doctor_id) in self.__has_reviewed

    def get_review(self, review_id: int) -> Review:
        if review_id not in self.__reviews:
            raise InvalidReviewError(review_id)
        return self.__reviews[review_id]

    def get_all_doctors_count(self) -> int:
        return len(self.__doctors)

    def get_total_reviews_count(self) -> int:
        return len(self.__reviews)

    def get_pending_aggregation(self) -> Optional[PendingAggregation]:
        return self.__pending
