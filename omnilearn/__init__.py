"""OmniLearn: course-state machine and content cache for generated courses."""

__version__ = "0.3.0"
