# RUN: python examples/01_template_build.py
"""Template build -- run the whole pipeline offline with mock collaborators.

Demonstrates: BuildPipelineOrchestrator with InMemoryStorage and
MockAIProvider, stage statuses, intent bindings and build warnings.
"""

import asyncio

from sitebuild import (
    BuildMode,
    BuildPipelineContext,
    BuildPipelineOrchestrator,
    InMemoryStorage,
    MockAIProvider,
    PipelineConfig,
)
from sitebuild.utils.logging import configure_logging


async def main() -> None:
    config = PipelineConfig.from_env()
    configure_logging(config.log_level, json=False)

    ai = MockAIProvider(
        pages={
            "home": (
                "<h1>Nonna's Kitchen</h1>"
                "<button>Book a Table</button>"
                '<a href="/about">Learn More</a>'
                '<a href="https://instagram.com/nonna">Instagram</a>'
            ),
            "contact": '<form><input type="submit" value="Send Message"></form>',
        },
        intents={"Send Message": "lead.submit"},
    )
    storage = InMemoryStorage()
    orchestrator = BuildPipelineOrchestrator(storage, ai, config=config)

    state = await orchestrator.execute(
        BuildPipelineContext(
            prompt="Family-run Italian restaurant in Brooklyn",
            business_id="biz-42",
            owner_user_id="user-7",
            mode=BuildMode.TEMPLATE,
            industry="restaurant",
        )
    )

    for stage, status in state.statuses().items():
        print(f"{stage:<13} {status}")

    print("\nBindings:")
    for binding in state.bundle.intents.bindings:
        label = repr(binding.label)
        print(f"  {binding.binding_id:<16} {label:<18} -> {binding.intent_id} ({binding.source})")

    print("\nWarnings:")
    for warning in state.bundle.build.warnings:
        print(f"  [{warning.code}] {warning.message}")

    print(f"\nStored bundles: {len(storage.bundles)} ({len(storage.bundles[0].bundle_json)} bytes)")


if __name__ == "__main__":
    asyncio.run(main())
