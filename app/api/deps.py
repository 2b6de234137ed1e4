from functools import lru_cache
from typing import Callable

from fastapi import Depends, Request

from app.core.config import Settings, get_settings, settings
from app.services.pipeline.interview_pipeline import InterviewPipeline
from app.services.providers import ProviderSet, build_default_providers
from app.services.report_store import ReportStore


def get_report_store(request: Request) -> ReportStore:
    """The store created with the application (see ``app.main``)."""
    return request.app.state.report_store


@lru_cache(maxsize=1)
def get_providers() -> ProviderSet:
    return build_default_providers(settings)


def get_pipeline_factory(
    providers: ProviderSet = Depends(get_providers),
    store: ReportStore = Depends(get_report_store),
    app_settings: Settings = Depends(get_settings),
) -> Callable[[str], InterviewPipeline]:
    """
    Dependency for providing a factory to create InterviewPipeline instances.
    One pipeline per request, sharing the providers and the report store.
    """
    def factory(correlation_id: str = None) -> InterviewPipeline:
        return InterviewPipeline(
            providers=providers,
            store=store,
            settings=app_settings,
            correlation_id=correlation_id,
        )
    return factory
