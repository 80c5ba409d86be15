from parameterized import parameterized

from medreview.contract.events import DoctorRegistered, ReviewSubmitted, OperatorUpdated
from medreview.contract.state import AggregatedRating
from medreview.errors.exceptions import NotAuthorizedError, InvalidDoctorError, InvalidReviewError, \
    RatingOutOfRangeError, CommentTooLongError, AlreadyReviewedError, InvalidAddressError, ValidationError, \
    StateConflictError
from medreview.tests.medreview_unit_test import ContractTestCase
from medreview.transaction.interface import AccessDeniedError
from medreview.transaction.types import ZERO_ADDRESS


class TestDoctorRegistry(ContractTestCase):

    def test_register_doctor(self):
        doctor_id = self.contract.register_doctor('Dr. Jane Smith', 'Cardiology', 'Healthcare Clinic', user=self.operator)
        self.assertEqual(1, doctor_id)
        self.assertEqual(DoctorRegistered(1, 'Dr. Jane Smith', 'Cardiology'), self.contract.events.last())
        self.assertEqual(1, self.contract.get_all_doctors_count())

        info = self.contract.get_doctor_info(1)
        self.assertEqual('Healthcare Clinic', info.clinic)
        self.assertEqual(0, info.total_reviews)
        self.assertTrue(info.is_registered)
        self.assertEqual(AggregatedRating(), self.contract.get_doctor_rating(1))

    def test_sequential_ids(self):
        self.assertEqual([1, 2, 3], [self.register(n) for n in ('Dr. Alice', 'Dr. Bob', 'Dr. Charlie')])
        self.assertEqual('Dr. Bob', self.contract.get_doctor_info(2).name)

    def test_only_operator_registers(self):
        with self.assertRaises(NotAuthorizedError):
            self.contract.register_doctor('Dr. John Doe', 'Neurology', 'Medical Center', user=self.patients[0])
        self.assertEqual(0, self.contract.get_all_doctors_count())
        self.assertEqual(0, len(self.contract.events))

    def test_update_operator(self):
        new_operator = self.patients[-1]
        with self.assertRaises(NotAuthorizedError):
            self.contract.update_operator(new_operator, user=new_operator)
        with self.assertRaises(InvalidAddressError):
            self.contract.update_operator(ZERO_ADDRESS, user=self.operator)
        self.assertEqual(self.operator, self.contract.operator)

        self.contract.update_operator(new_operator, user=self.operator)
        self.assertEqual(OperatorUpdated(self.operator, new_operator), self.contract.events.last())
        with self.assertRaises(NotAuthorizedError):
            self.register()
        self.contract.register_doctor('Dr. New', 'Surgery', 'Hospital', user=new_operator)

    def test_unknown_doctor_queries(self):
        for query in (self.contract.get_doctor_info, self.contract.get_doctor_rating,
                      self.contract.get_doctor_review_count):
            with self.assertRaises(InvalidDoctorError):
                query(1)
        with self.assertRaises(InvalidReviewError):
            self.contract.get_review(1)


class TestReviewSubmission(ContractTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.doctor_id = self.register()

    def assertNothingSubmitted(self):
        self.assertEqual(0, self.contract.get_doctor_review_count(self.doctor_id))
        self.assertEqual(0, self.contract.get_total_reviews_count())
        self.assertFalse(self.contract.get_review_status(self.patients[0], self.doctor_id))
        self.assertEqual([], self.contract.events.filter(ReviewSubmitted))

    def test_submit_review(self):
        review_id = self.submit(self.doctor_id, self.patients[0], (4, 5, 4, 3), 'Great doctor, very professional')
        self.assertEqual(1, review_id)
        self.assertEqual(ReviewSubmitted(1, self.doctor_id, self.patients[0]), self.contract.events.last())
        self.assertEqual(1, self.contract.get_total_reviews_count())
        self.assertEqual(1, self.contract.get_doctor_review_count(self.doctor_id))
        self.assertTrue(self.contract.get_review_status(self.patients[0], self.doctor_id))
        self.assertFalse(self.contract.get_review_status(self.patients[1], self.doctor_id))

        review = self.contract.get_review(review_id)
        self.assertEqual('Great doctor, very professional', review.comment)
        self.assertEqual(self.patients[0], review.reviewer)
        self.assertEqual(self.ledger.timestamp, review.timestamp)

    def test_ratings_are_stored_encrypted(self):
        review = self.contract.get_review(self.submit(self.doctor_id, self.patients[0], (4, 5, 2, 3)))
        self.assertEqual(4, len(set(review.handles)))
        for handle, expected in zip(review.handles, (4, 5, 2, 3)):
            self.assertTrue(self.gateway.is_allowed(handle, self.contract.address))
            self.assertEqual(expected, self.gateway.user_decrypt(handle, self.patients[0]))
            with self.assertRaises(AccessDeniedError):
                self.gateway.user_decrypt(handle, self.patients[1])

    def test_multiple_reviewers(self):
        for i, patient in enumerate(self.patients[:3]):
            self.submit(self.doctor_id, patient, comment=f'Review {i}')
        self.assertEqual(3, self.contract.get_doctor_review_count(self.doctor_id))
        self.assertEqual([1, 2, 3], self.contract.get_doctor_review_ids(self.doctor_id))

    def test_review_ids_are_global(self):
        other = self.register('Dr. Other')
        self.submit(self.doctor_id, self.patients[0])
        self.assertEqual(2, self.submit(other, self.patients[0]))
        self.assertEqual(1, self.contract.get_doctor_review_count(other))
        self.assertEqual(2, self.contract.get_total_reviews_count())

    def test_duplicate_review_rejected(self):
        self.submit(self.doctor_id, self.patients[0], comment='First review')
        with self.assertRaises(AlreadyReviewedError) as ctx:
            self.submit(self.doctor_id, self.patients[0], (5, 5, 5, 5), 'Second review attempt')
        self.assertIsInstance(ctx.exception, StateConflictError)
        self.assertEqual(1, self.contract.get_doctor_review_count(self.doctor_id))
        self.assertEqual(1, len(self.contract.events.filter(ReviewSubmitted)))

    @parameterized.expand([
        ('rating_low', (0, 5, 4, 3)),
        ('rating_high', (6, 5, 4, 3)),
        ('professionalism', (4, 9, 4, 3)),
        ('communication_negative', (4, 5, -1, 3)),
        ('wait_time', (4, 5, 4, 0)),
        ('not_an_int', (4, 5, '4', 3)),
        ('bool', (4, True, 4, 3)),
    ])
    def test_rating_out_of_range(self, _, ratings):
        with self.assertRaises(RatingOutOfRangeError) as ctx:
            self.submit(self.doctor_id, self.patients[0], ratings)
        self.assertIsInstance(ctx.exception, ValidationError)
        self.assertNothingSubmitted()

    def test_rating_bounds_accepted(self):
        self.submit(self.doctor_id, self.patients[0], (1, 5, 1, 5))
        self.assertEqual(1, self.contract.get_doctor_review_count(self.doctor_id))

    def test_comment_length(self):
        self.submit(self.doctor_id, self.patients[0], comment='x' * 500)
        self.submit(self.doctor_id, self.patients[1], comment='')
        with self.assertRaises(CommentTooLongError):
            self.submit(self.doctor_id, self.patients[2], comment='x' * 501)
        self.assertEqual(2, self.contract.get_doctor_review_count(self.doctor_id))
        self.assertFalse(self.contract.get_review_status(self.patients[2], self.doctor_id))

    @parameterized.expand([('zero', 0), ('unregistered', 2), ('far_away', 999), ('negative', -1), ('bool', True)])
    def test_invalid_doctor(self, _, doctor_id):
        with self.assertRaises(InvalidDoctorError):
            self.submit(doctor_id, self.patients[0])
        self.assertNothingSubmitted()

    def test_check_order(self):
        with self.assertRaises(InvalidDoctorError):
            self.submit(999, self.patients[0], (0, 0, 0, 0), 'x' * 501)
        with self.assertRaises(RatingOutOfRangeError):
            self.submit(self.doctor_id, self.patients[0], (0, 0, 0, 0), 'x' * 501)

        self.submit(self.doctor_id, self.patients[0])
        with self.assertRaises(CommentTooLongError):
            self.submit(self.doctor_id, self.patients[0], comment='x' * 501)

    def test_review_count_matches_reviews(self):
        other = self.register('Dr. Other')
        for i, patient in enumerate(self.patients):
            self.submit(self.doctor_id if i % 2 else other, patient)
            if i % 3 == 0:
                with self.assertRaises(AlreadyReviewedError):
                    self.submit(self.doctor_id if i % 2 else other, patient)

        for doctor_id in (self.doctor_id, other):
            reviews = [self.contract.get_review(r) for r in range(1, self.contract.get_total_reviews_count() + 1)]
            self.assertEqual(sum(1 for r in reviews if r.doctor_id == doctor_id),
                             self.contract.get_doctor_review_count(doctor_id))
