"""Use cases: training calls, badge engine, reports and health check."""
