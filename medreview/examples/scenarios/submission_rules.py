from medreview.errors.exceptions import AlreadyReviewedError, RatingOutOfRangeError, CommentTooLongError, \
    InvalidDoctorError, NotAuthorizedError
from medreview.examples.scenario import ScenarioBuilder

operator, p1, p2 = 'operator', 'patient1', 'patient2'
sb = ScenarioBuilder('ReviewSubmissionRules').set_users(operator, p1, p2)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Eve', 'Neurology', 'Medical Center'], user=p1, expected_exception=NotAuthorizedError)
sb.add_transaction('register_doctor', ['Dr. Eve', 'Neurology', 'Medical Center'], user=operator)

sb.add_transaction('submit_review', [999, 4, 5, 4, 3, 'Test'], user=p1, expected_exception=InvalidDoctorError)
sb.add_transaction('submit_review', [1, 0, 5, 4, 3, 'Test'], user=p1, expected_exception=RatingOutOfRangeError)
sb.add_transaction('submit_review', [1, 4, 5, 4, 6, 'Test'], user=p1, expected_exception=RatingOutOfRangeError)
sb.add_transaction('submit_review', [1, 4, 5, 4, 3, 'x' * 501], user=p1, expected_exception=CommentTooLongError)
sb.add_state_assertion('get_doctor_review_count', 1, expected_value=0)
sb.add_state_assertion('get_review_status', p1, 1, expected_value=False)

sb.add_transaction('submit_review', [1, 4, 5, 4, 3, 'x' * 500], user=p1)
sb.add_transaction('submit_review', [1, 5, 5, 5, 5, 'Second review attempt'], user=p1, expected_exception=AlreadyReviewedError)
sb.add_transaction('submit_review', [1, 1, 1, 1, 1, 'Other patient'], user=p2)
sb.add_state_assertion('get_doctor_review_count', 1, expected_value=2)
sb.add_state_assertion('get_total_reviews_count', expected_value=2)
sb.add_state_assertion('get_review_status', p1, 1, expected_value=True)
sb.add_event_assertion('ReviewSubmitted', 2)
SCENARIO = sb.build()
