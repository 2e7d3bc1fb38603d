from prometheus_client import Counter, Gauge, Histogram


class BoxOfficeMetrics:
    """
    Box Office Core Metrics Collector

    Tracks the booking lifecycle, door check-ins and optimistic-concurrency
    pressure on the inventory ledger.
    """

    def __init__(self) -> None:
        # ========== Booking Lifecycle Metrics ==========
        self.booking_requests = Counter(
            'box_office_booking_requests_total',
            'Total booking requests',
            ['registration_type', 'result'],  # result: confirmed/out_of_stock/...
        )

        self.booking_duration = Histogram(
            'box_office_booking_duration_seconds',
            'Booking creation processing time',
            ['registration_type'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.booking_cancellations = Counter(
            'box_office_booking_cancellations_total',
            'Total booking cancellations',
            ['result'],
        )

        # ========== Check-In Metrics ==========
        self.check_ins = Counter(
            'box_office_check_ins_total',
            'Total check-in attempts',
            ['method', 'result'],  # result: accepted or rejection code
        )

        # ========== Inventory Ledger Metrics ==========
        self.ledger_conflicts = Counter(
            'box_office_ledger_conflicts_total',
            'Compare-and-set conflicts on event counters',
            ['operation'],  # operation: reserve/release
        )

        self.ledger_exhausted = Counter(
            'box_office_ledger_retries_exhausted_total',
            'Ledger operations that ran out of attempts',
            ['operation'],
        )

        self.tickets_available = Gauge(
            'box_office_tickets_available',
            'Available tickets after the last ledger write',
            ['event_id'],
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, registration_type: str, result: str, duration: float) -> None:
        self.booking_requests.labels(registration_type=registration_type, result=result).inc()
        self.booking_duration.labels(registration_type=registration_type).observe(duration)

    def record_cancellation(self, *, result: str) -> None:
        self.booking_cancellations.labels(result=result).inc()

    def record_check_in(self, *, method: str, result: str) -> None:
        self.check_ins.labels(method=method, result=result).inc()

    def record_ledger_conflict(self, *, operation: str) -> None:
        self.ledger_conflicts.labels(operation=operation).inc()

    def record_ledger_exhausted(self, *, operation: str) -> None:
        self.ledger_exhausted.labels(operation=operation).inc()

    def update_tickets_available(self, *, event_id: str, available: int) -> None:
        self.tickets_available.labels(event_id=event_id).set(available)


# Global metrics instance
metrics = BoxOfficeMetrics()
