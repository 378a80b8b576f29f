"""SQLAlchemy persistence: engine, models, repositories, transactions."""
