from medreview.contract.events import EventLog, DoctorRegistered, ReviewSubmitted, AggregationRequested, \
    RatingRevealed
from medreview.tests.medreview_unit_test import ContractTestCase, MedReviewTestCase


class TestEventLog(MedReviewTestCase):

    def test_emit_and_filter(self):
        log = EventLog()
        log.emit(DoctorRegistered(1, 'Dr. A', 'Surgery'))
        log.emit(RatingRevealed(1, 4, 3))
        log.emit(DoctorRegistered(2, 'Dr. B', 'Surgery'))

        self.assertEqual(3, len(log))
        self.assertEqual(RatingRevealed(1, 4, 3), log.filter(RatingRevealed)[0])
        self.assertEqual([1, 2], [e.doctor_id for e in log.filter(DoctorRegistered)])
        self.assertEqual(DoctorRegistered(2, 'Dr. B', 'Surgery'), log.last())

    def test_listeners(self):
        log, seen = EventLog(), []
        log.subscribe(seen.append)
        log.emit(DoctorRegistered(1, 'Dr. A', 'Surgery'))
        log.unsubscribe(seen.append)
        log.emit(DoctorRegistered(2, 'Dr. B', 'Surgery'))
        self.assertEqual([DoctorRegistered(1, 'Dr. A', 'Surgery')], seen)

    def test_iteration_is_a_snapshot(self):
        log = EventLog()
        log.emit(DoctorRegistered(1, 'Dr. A', 'Surgery'))
        for _ in log:
            log.emit(DoctorRegistered(2, 'Dr. B', 'Surgery'))
        self.assertEqual(2, len(log))


class TestContractEvents(ContractTestCase):

    def test_event_sequence(self):
        seen = []
        self.contract.events.subscribe(lambda e: seen.append(type(e)))
        doctor_id = self.reviewed_doctor((5, 5, 5, 5), (4, 4, 4, 4), (3, 3, 3, 3))
        request_id = self.contract.request_aggregation(doctor_id, user=self.operator)
        self.gateway.fulfill(request_id)

        self.assertEqual([DoctorRegistered] + [ReviewSubmitted] * 3 + [AggregationRequested, RatingRevealed], seen)

    def test_listener_sees_new_state(self):
        doctor_id = self.reviewed_doctor((5, 5, 5, 5), (4, 4, 4, 4), (3, 3, 3, 3))
        revealed = []

        def on_event(event):
            if isinstance(event, RatingRevealed):
                revealed.append(self.contract.get_doctor_rating(event.doctor_id))

        self.contract.events.subscribe(on_event)
        self.contract.request_aggregation(doctor_id, user=self.operator)
        self.gateway.fulfill_pending()
        self.assertEqual([self.contract.get_doctor_rating(doctor_id)], revealed)
        self.assertTrue(revealed[0].is_revealed)


class TestFailingListener(ContractTestCase):

    def failing_on(self, event_type):
        def listener(event):
            if isinstance(event, event_type):
                raise RuntimeError(f'indexer cannot handle {event_type.__name__}')
        self.contract.events.subscribe(listener)

    def test_reveal_survives_failing_listener(self):
        self.failing_on(RatingRevealed)
        doctor_id = self.reviewed_doctor((5, 5, 5, 5), (4, 4, 4, 4), (3, 3, 3, 3))
        request_id = self.contract.request_aggregation(doctor_id, user=self.operator)

        with self.assertLogs(level='ERROR') as logs:
            self.gateway.fulfill(request_id)
        self.assertIn('RatingRevealed', logs.output[0])

        self.assertTrue(self.contract.get_doctor_rating(doctor_id).is_revealed)
        self.assertIsNone(self.contract.get_pending_aggregation())
        self.assertEqual([], self.gateway.pending_requests())
        self.assertEqual(RatingRevealed(doctor_id, 4, 3), self.contract.events.last())

        # Neither the contract nor the gateway is left blocked
        self.ledger.advance_time(10 ** 7)
        other = self.register('Dr. Other')
        for patient in self.patients[3:6]:
            self.submit(other, patient, (2, 2, 2, 2))
        other_request = self.contract.request_aggregation(other, user=self.operator)
        with self.assertLogs(level='ERROR'):
            self.assertEqual([other_request], self.gateway.fulfill_pending())
        self.assertEqual(2, self.contract.get_doctor_rating(other).average_rating)

    def test_request_survives_failing_listener(self):
        self.failing_on(AggregationRequested)
        doctor_id = self.reviewed_doctor((5, 5, 5, 5), (4, 4, 4, 4), (3, 3, 3, 3))

        with self.assertLogs(level='ERROR'):
            request_id = self.contract.request_aggregation(doctor_id, user=self.operator)
        self.assertEqual(request_id, self.contract.get_pending_aggregation().request_id)
        self.assertEqual([request_id], self.gateway.pending_requests())

        self.gateway.fulfill(request_id)
        self.assertTrue(self.contract.get_doctor_rating(doctor_id).is_revealed)

    def test_later_listeners_still_notified(self):
        seen = []
        self.failing_on(DoctorRegistered)
        self.contract.events.subscribe(seen.append)
        with self.assertLogs(level='ERROR'):
            doctor_id = self.register()
        self.assertEqual(doctor_id, seen[0].doctor_id)
