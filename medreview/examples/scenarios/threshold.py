from medreview.errors.exceptions import InsufficientReviewsError, NotAuthorizedError
from medreview.examples.scenario import ScenarioBuilder

operator, p1, p2, p3 = 'operator', 'patient1', 'patient2', 'patient3'
sb = ScenarioBuilder('AggregationThreshold').set_users(operator, p1, p2, p3)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Alice', 'Surgery', 'Hospital A'], user=operator)

sb.add_transaction('submit_review', [1, 2, 3, 4, 5, 'Review 1'], user=p1)
sb.add_transaction('submit_review', [1, 3, 3, 3, 3, 'Review 2'], user=p2)
sb.add_state_assertion('can_request_aggregation', 1, expected_value=False)
sb.add_transaction('request_aggregation', [1], user=operator, expected_exception=InsufficientReviewsError)
sb.add_state_assertion('get_pending_aggregation', expected_value=None)
sb.add_event_assertion('AggregationRequested', 0)

sb.add_transaction('submit_review', [1, 3, 4, 5, 1, 'Review 3'], user=p3)
sb.add_transaction('request_aggregation', [1], user=p3, expected_exception=NotAuthorizedError)
sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_event_assertion('AggregationRequested', 1)
sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=2)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_professionalism', expected_value=3)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_communication', expected_value=4)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_wait_time', expected_value=3)
SCENARIO = sb.build()
