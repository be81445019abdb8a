# RUN: SITEBUILD_AI_BASE_URL=http://localhost:8080 python examples/02_openai_compat_sqlite.py
"""AI build -- generate a site with an OpenAI-compatible endpoint, store it in SQLite.

Demonstrates: ProviderConfig.from_env(), OpenAICompatProvider and
SQLiteStorage as async context managers, StageExecutionError handling,
and reloading the persisted bundle.
"""

import asyncio
import sys

from sitebuild import (
    BuildPipelineContext,
    BuildPipelineOrchestrator,
    OpenAICompatProvider,
    PipelineConfig,
    ProviderConfig,
    SQLiteStorage,
    StageExecutionError,
)
from sitebuild.bundle.utils import load_bundle_row, validate_bundle_consistency
from sitebuild.utils.logging import configure_logging


async def main() -> int:
    config = PipelineConfig.from_env()
    configure_logging(config.log_level, json=False)

    async with SQLiteStorage("sites.db") as storage, OpenAICompatProvider(
        ProviderConfig.from_env()
    ) as ai:
        orchestrator = BuildPipelineOrchestrator(storage, ai, config=config)
        context = BuildPipelineContext(
            prompt="Licensed roofing contractor serving Denver, free estimates",
            business_id="biz-1",
            owner_user_id="user-1",
            industry="contractor",
        )

        try:
            state = await orchestrator.execute(context)
        except StageExecutionError as exc:
            print(f"Build failed in stage {exc.stage}: [{exc.code}] {exc.message}")
            if exc.state is not None:
                print(exc.state.statuses())
            return 1

        row = await storage.get_latest_bundle(state.site_id)
        assert row is not None
        bundle = load_bundle_row(row)
        result = validate_bundle_consistency(bundle)
        print(f"Built {len(bundle.pages)} pages, {len(bundle.intents.bindings)} bindings")
        print(f"Consistent: {result.valid}, warnings: {[w.code for w in result.warnings]}")
        for span in orchestrator.tracer.export_json():
            print(f"  {span['name']:<20} {span['duration_ms']} ms")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
