"""
This module contains the definitions of all exceptions which may be publicly raised by medreview
"""


class MedReviewError(Exception):
    """
    Base class of all medreview errors
    """
    pass


class RequireException(MedReviewError):
    """
    A contract entry point rejected the transaction.

    Rejected transactions never leave partial state changes behind.
    """
    pass


# Authorization

class AuthorizationError(RequireException):
    """
    Caller lacks the role required for an entry point
    """
    pass


class NotAuthorizedError(AuthorizationError):
    def __init__(self, msg: str = 'Not authorized'):
        super().__init__(msg)


# Validation

class ValidationError(RequireException):
    """
    Malformed transaction input
    """
    pass


class InvalidDoctorError(ValidationError):
    def __init__(self, doctor_id):
        super().__init__(f'Invalid doctor ID: {doctor_id}')
        self.doctor_id = doctor_id


class InvalidReviewError(ValidationError):
    def __init__(self, review_id):
        super().__init__(f'Invalid review ID: {review_id}')
        self.review_id = review_id


class RatingOutOfRangeError(ValidationError):
    def __init__(self, dimension: str, value, lo: int, hi: int):
        super().__init__(f'Rating must be between {lo}-{hi} (got {value} for {dimension})')
        self.dimension = dimension
        self.value = value


class CommentTooLongError(ValidationError):
    def __init__(self, length: int, limit: int):
        super().__init__(f'Comment too long ({length} > {limit} characters)')
        self.length = length


class InvalidAddressError(ValidationError):
    def __init__(self, msg: str = 'Invalid address'):
        super().__init__(msg)


# State conflicts

class StateConflictError(RequireException):
    """
    Transaction is well-formed but not allowed in the current contract state
    """
    pass


class DoctorNotRegisteredError(StateConflictError):
    def __init__(self, doctor_id):
        super().__init__(f'Doctor {doctor_id} is not registered')
        self.doctor_id = doctor_id


class AlreadyReviewedError(StateConflictError):
    def __init__(self, doctor_id):
        super().__init__(f'Already reviewed this doctor ({doctor_id})')
        self.doctor_id = doctor_id


class AggregationInProgressError(StateConflictError):
    def __init__(self, pending_doctor_id):
        super().__init__(f'Another aggregation in progress (doctor {pending_doctor_id})')
        self.pending_doctor_id = pending_doctor_id


class InsufficientReviewsError(StateConflictError):
    def __init__(self, doctor_id, count: int, required: int):
        super().__init__(f'Minimum {required} reviews required for aggregation (doctor {doctor_id} has {count})')
        self.doctor_id = doctor_id
        self.count = count


class CooldownActiveError(StateConflictError):
    def __init__(self, doctor_id, available_at: int):
        super().__init__(f'Aggregation cooldown for doctor {doctor_id} active until {available_at}')
        self.doctor_id = doctor_id
        self.available_at = available_at


class NoPendingAggregationError(StateConflictError):
    def __init__(self):
        super().__init__('No aggregation in progress')


class AggregationNotExpiredError(StateConflictError):
    def __init__(self, request_id: int, expires_at: int):
        super().__init__(f'Decryption request {request_id} does not expire before {expires_at}')
        self.request_id = request_id
        self.expires_at = expires_at


# Integrity

class IntegrityError(RequireException):
    """
    Data delivered by the decryption gateway cannot be trusted or interpreted
    """
    pass


class InvalidDecryptionProofError(IntegrityError):
    def __init__(self, request_id: int):
        super().__init__(f'Decryption proof for request {request_id} failed verification')
        self.request_id = request_id


class UnknownDecryptionRequestError(IntegrityError):
    def __init__(self, request_id: int):
        super().__init__(f'Decryption request {request_id} is not awaiting a result')
        self.request_id = request_id


class MalformedCleartextsError(IntegrityError):
    pass
