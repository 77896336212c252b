"""Git metadata collection."""
