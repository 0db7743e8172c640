"""Tests for task routing between service queues."""

import pytest

from reservo.celery_app import (
    AUTH_QUEUE,
    DEFAULT_QUEUE,
    NOTIFICATIONS_QUEUE,
    PAYMENTS_QUEUE,
    celery_app,
)


def routed_queue(task_name: str) -> str:
    return celery_app.amqp.router.route({}, task_name, (), {})["queue"].name


class TestRouting:
    @pytest.mark.parametrize(
        "task_name,queue",
        [
            ("authenticate", AUTH_QUEUE),
            ("create_charge", PAYMENTS_QUEUE),
            ("notify_email", NOTIFICATIONS_QUEUE),
        ],
    )
    def test_known_tasks_reach_their_service(self, task_name, queue):
        assert routed_queue(task_name) == queue

    def test_unknown_task_stays_off_service_queues(self):
        """A mistyped task name is not delivered to any service worker."""
        queue = routed_queue("authenticte")

        assert queue == DEFAULT_QUEUE
        assert queue not in (AUTH_QUEUE, PAYMENTS_QUEUE, NOTIFICATIONS_QUEUE)
