from medreview.examples.scenario import ScenarioBuilder

operator, alice, bob, carol = 'operator', 'alice', 'bob', 'carol'
sb = ScenarioBuilder('RatingRoundTrip').set_users(operator, alice, bob, carol)
sb.set_deployment_transaction(owner=operator)
sb.add_transaction('register_doctor', ['Dr. Jane Smith', 'Cardiology', 'Healthcare Clinic'], user=operator)
sb.add_event_assertion('DoctorRegistered', 1)

sb.add_transaction('submit_review', [1, 5, 5, 4, 3, 'Great doctor, very professional'], user=alice)
sb.add_transaction('submit_review', [1, 4, 4, 4, 4, 'Good'], user=bob)
sb.add_transaction('submit_review', [1, 3, 5, 2, 1, ''], user=carol)
sb.add_state_assertion('get_doctor_review_count', 1, expected_value=3)
sb.add_state_assertion('get_review_status', alice, 1, expected_value=True)
sb.add_decrypt_assertion(1, 'rating', user=alice, expected_value=5)
sb.add_decrypt_assertion(3, 'wait_time', user=carol, expected_value=1)

sb.add_state_assertion('can_request_aggregation', 1, expected_value=True)
sb.add_transaction('request_aggregation', [1], user=operator)
sb.add_state_assertion('get_pending_aggregation', attr='doctor_id', expected_value=1)
sb.add_state_assertion('get_doctor_rating', 1, attr='is_revealed', expected_value=False)

sb.add_fulfillment()
sb.add_state_assertion('get_pending_aggregation', expected_value=None)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_rating', expected_value=4)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_professionalism', expected_value=4)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_communication', expected_value=3)
sb.add_state_assertion('get_doctor_rating', 1, attr='average_wait_time', expected_value=2)
sb.add_state_assertion('get_doctor_rating', 1, attr='total_reviews', expected_value=3)
sb.add_state_assertion('get_doctor_rating', 1, attr='is_revealed', expected_value=True)
sb.add_event_assertion('RatingRevealed', 1)
SCENARIO = sb.build()
