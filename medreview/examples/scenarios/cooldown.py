from medreview.config import cfg
from medreview.errors.exceptions import CooldownActiveError
from medreview.examples.scenario import ScenarioBuilder

operator, p1, p2, p3, p4 = 'operator', 'patient1', 'patient2', 'patient3', 'patient4'
sb = ScenarioBuilder('AggregationCooldown').set_users(operator, p1, p2, p3, p4)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Bob', 'Pediatrics', 'Hospital B'], user=operator)
sb.add_transaction('submit_review', [1, 5, 5, 5, 5, ''], user=p1)
sb.add_transaction('submit_review', [1, 5, 4, 5, 4, ''], user=p2)
sb.add_transaction('submit_review', [1, 4, 4, 4, 4, ''], user=p3)
sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=4)

# Another review arrives, but the aggregate was revealed recently
sb.add_transaction('submit_review', [1, 1, 1, 1, 1, 'Long wait'], user=p4)
sb.add_time_travel(cfg.aggregation_cooldown // 2)
sb.add_state_assertion('can_request_aggregation', 1, expected_value=False)
sb.add_transaction('request_aggregation', [1], user=operator, expected_exception=CooldownActiveError)
sb.add_state_assertion('get_doctor_rating', 1, attr='total_reviews', expected_value=3)

sb.add_time_travel(cfg.aggregation_cooldown - cfg.aggregation_cooldown // 2)
sb.add_state_assertion('can_request_aggregation', 1, expected_value=True)
sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_fulfillment()
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=3)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_wait_time', expected_value=3)
sb.add_state_assertion('get_doctor_rating', 1, attr='total_reviews', expected_value=4)
sb.add_event_assertion('RatingRevealed', 2)
SCENARIO = sb.build()
