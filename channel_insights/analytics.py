"""Channel analysis: live YouTube data when available, synthesized otherwise."""
from __future__ import annotations

import logging
import random
from typing import Optional

from .services import engagement, quality
from .services.content import profile_content
from .services.synthesizer import (
    Clock,
    MockChannelSynthesizer,
    estimate_growth,
    synthesize_demographics,
    utcnow,
)
from .snapshots import (
    DATA_SOURCE_API,
    AnalysisResult,
    ChannelSeed,
    ChannelSnapshot,
    MetricsResult,
)
from .youtube import YouTubeClient

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(
        self,
        client: Optional[YouTubeClient] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utcnow,
        synthesizer: Optional[MockChannelSynthesizer] = None,
    ) -> None:
        self.client = client or YouTubeClient()
        self.rng = rng or random.Random()
        self.clock = clock
        self.synthesizer = synthesizer or MockChannelSynthesizer(rng=self.rng, clock=clock)

    def analyze(
        self, seed: ChannelSeed, growth_consistency_percent: Optional[float] = None
    ) -> AnalysisResult:
        logger.info("Starting analysis for channel: %s", seed.display_name)
        snapshot = self.client.fetch_snapshot(seed)
        if snapshot is None:
            logger.warning("Could not fetch channel details for %s, using synthesized data", seed.display_name)
            return self.synthesizer.synthesize(seed, growth_consistency_percent)

        result = self.analyze_snapshot(snapshot, growth_consistency_percent)
        logger.info("Analysis completed for %s", snapshot.name)
        return result

    def analyze_snapshot(
        self, snapshot: ChannelSnapshot, growth_consistency_percent: Optional[float] = None
    ) -> AnalysisResult:
        estimate = engagement.estimate(snapshot.recent_videos)
        # No audience data is available upstream; demographics are always synthesized.
        demographics = synthesize_demographics(self.rng)
        score = quality.score(
            estimate.engagement_rate_percent,
            demographics.fake_follower_percent,
            growth_consistency_percent,
        )
        return AnalysisResult(
            channel=snapshot,
            metrics=MetricsResult.from_estimate(estimate, score),
            growth=estimate_growth(snapshot.subscriber_count, estimate.average_views, self.rng),
            content=profile_content(snapshot),
            demographics=demographics,
            data_source=DATA_SOURCE_API,
            analyzed_at=self.clock(),
        )
