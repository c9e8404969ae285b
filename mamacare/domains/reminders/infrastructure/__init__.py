# Infrastructure layer: SQLAlchemy repositories and the APScheduler runner
