# create_all() 전에 모든 테이블이 Base.metadata 에 등록되도록 import
from fitness_tracker.models.user import User, UserProfile  # noqa
from fitness_tracker.models.activity import Activity  # noqa
from fitness_tracker.models.activity_log import ActivityLog  # noqa
from fitness_tracker.models.workout import WorkoutSession  # noqa
from fitness_tracker.models.measurement import BodyMeasurement  # noqa
