"""Exceptions raised by the episode acquisition pipeline"""


class ScraperError(Exception):
    """Base exception for all scraper errors"""

    pass


class CredentialUnavailable(ScraperError):
    """No working SoundCloud client_id could be found"""

    pass


class PipelineStageError(ScraperError):
    """A run-aborting failure in one of the pipeline stages"""

    def __init__(self, stage, cause: Exception):
        self.stage = stage
        self.cause = cause
        stage_name = getattr(stage, "value", stage)
        super().__init__(f"{stage_name} failed: {cause}")
