from .client import ApiClient, JobsApi, MatchApi, SavedJobsApi

__all__ = ["ApiClient", "JobsApi", "MatchApi", "SavedJobsApi"]
