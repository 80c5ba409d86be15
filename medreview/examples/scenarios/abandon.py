from medreview.config import cfg
from medreview.errors.exceptions import AggregationNotExpiredError, AggregationInProgressError, \
    NoPendingAggregationError
from medreview.examples.scenario import ScenarioBuilder

operator, p1, p2, p3 = 'operator', 'patient1', 'patient2', 'patient3'
sb = ScenarioBuilder('AbandonStuckAggregation').set_users(operator, p1, p2, p3)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Dana', 'Oncology', 'Clinic D'], user=operator)
sb.add_transaction('submit_review', [1, 3, 3, 3, 3, ''], user=p1)
sb.add_transaction('submit_review', [1, 4, 4, 4, 4, ''], user=p2)
sb.add_transaction('submit_review', [1, 5, 5, 5, 5, ''], user=p3)
sb.add_transaction('abandon_aggregation', user=operator, expected_exception=NoPendingAggregationError)

# The oracle never answers this request
sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_transaction('abandon_aggregation', user=operator, expected_exception=AggregationNotExpiredError)
sb.add_time_travel(cfg.aggregation_request_timeout)
sb.add_transaction('request_aggregation', [1], user=operator, expected_exception=AggregationInProgressError)
sb.add_transaction('abandon_aggregation', user=operator)
sb.add_state_assertion('get_pending_aggregation', expected_value=None)
sb.add_event_assertion('AggregationAbandoned', 1)

sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=4)
sb.add_state_assertion('get_doctor_rating', 1, attr='is_revealed', expected_value=True)
SCENARIO = sb.build()
