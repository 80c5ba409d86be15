from medreview.errors.exceptions import AggregationInProgressError
from medreview.examples.scenario import ScenarioBuilder

operator, p1, p2, p3 = 'operator', 'patient1', 'patient2', 'patient3'
sb = ScenarioBuilder('SingleAggregationInFlight').set_users(operator, p1, p2, p3)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Alice', 'Surgery', 'Hospital A'], user=operator)
sb.add_transaction('register_doctor', ['Dr. Charlie', 'Dermatology', 'Clinic C'], user=operator)
for patient, rating in ((p1, 5), (p2, 4), (p3, 4)):
    sb.add_transaction('submit_review', [1, rating, rating, rating, rating, ''], user=patient)
    sb.add_transaction('submit_review', [2, 6 - rating, 2, 2, 2, ''], user=patient)

sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_state_assertion('can_request_aggregation', 2, expected_value=False)
sb.add_transaction('request_aggregation', [2], user=operator, expected_exception=AggregationInProgressError)
sb.add_state_assertion('get_pending_aggregation', attr='doctor_id', expected_value=1)

sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=4)
sb.add_state_assertion('get_doctor_rating', 2, attr='is_revealed', expected_value=False)
sb.add_transaction('request_aggregation', [2], user=operator)
sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 2, attr='average_rating', expected_value=1)
sb.add_state_assertion('get_doctor_rating', 2, attr='average_professionalism', expected_value=2)
SCENARIO = sb.build()
