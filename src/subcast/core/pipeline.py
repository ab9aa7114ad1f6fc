"""Pipeline orchestrator: acquire, transcribe, segment, translate, save."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from subcast.core.config import SubcastConfig
from subcast.core.errors import StoreError, SubcastError
from subcast.core.events import EventCallback, EventEmitter
from subcast.core.languages import AUTO, normalize_language, same_language
from subcast.core.models import PipelineResult, TranslationOutcome
from subcast.downloader.acquirer import MediaAcquirer
from subcast.downloader.resolver import validate_source
from subcast.downloader.store import ObjectStore
from subcast.subtitles.vtt import write_vtt
from subcast.transcriber.job import TranscriptionJob
from subcast.translate.engine import TranslationEngine
from subcast.utils.console import console


@dataclass
class PipelineComponents:
    """Collaborators used by run_pipeline; tests swap in fakes."""

    acquirer: MediaAcquirer
    transcriber_factory: Callable[[], TranscriptionJob]
    translator: TranslationEngine
    store: ObjectStore | None = None
    sleep: Callable[[float], None] = time.sleep


def build_components(config: SubcastConfig) -> PipelineComponents:
    """Wire the production collaborators from config.

    Raises:
        ConfigError: Required credentials are missing. Checked before any
            client is created, so nothing touches the network.
    """
    config.require_credentials()

    from subcast.downloader.http import make_session
    from subcast.downloader.store import CloudinaryStore
    from subcast.transcriber.assemblyai import AssemblyAIClient
    from subcast.translate.providers import build_providers

    store = CloudinaryStore(config.cloudinary)
    session = make_session(config.acquisition.user_agent)
    acquirer = MediaAcquirer(store, config.acquisition, session=session)
    client = AssemblyAIClient(config.assemblyai)
    primary, mirrors = build_providers(config.translation)
    translator = TranslationEngine(primary, mirrors, config.translation)
    return PipelineComponents(
        acquirer=acquirer,
        transcriber_factory=lambda: TranscriptionJob(client),
        translator=translator,
        store=store,
    )


def _source_stem(source: str | Path) -> str:
    if isinstance(source, Path):
        return source.stem
    return "remote"


def _discard_written(result: PipelineResult) -> None:
    for path in result.written:
        path.unlink(missing_ok=True)
    result.written.clear()
    result.subtitle_path = None
    result.translated_path = None


def run_pipeline(
    source: str | Path,
    config: SubcastConfig,
    translate: str | None = None,
    language: str = AUTO,
    on_event: EventCallback | None = None,
    components: PipelineComponents | None = None,
) -> PipelineResult:
    """Run the full processing pipeline.

    Args:
        source: URL or local file path.
        config: Full application config.
        translate: Target language, or None to skip translation.
        language: Spoken language passed to the transcription provider.
        on_event: Optional callback for streaming progress events.
        components: Pre-built collaborators; built from config when omitted.

    Returns:
        PipelineResult. Errors from the subcast taxonomy are reported as
        ``ok=False`` with one message. Any other exception propagates. In
        both cases every file written during the run is removed first.
    """
    emit = EventEmitter(on_event)
    result = PipelineResult(ok=False)
    output_dir = Path(config.output_dir)

    try:
        if components is None:
            components = build_components(config)
        source = validate_source(source)

        # Step 1: Acquire a durable remote URL
        emit("acquire", 0.0, f"Acquiring: {source}")
        acquisition = components.acquirer.acquire(source)
        result.acquisition = acquisition
        result.remote_url = acquisition.remote_url
        emit(
            "acquire",
            1.0,
            f"Acquired via {acquisition.strategy_used.value}",
            data={"remote_url": acquisition.remote_url},
        )

        # Step 2: Transcribe
        emit("transcribe", 0.0, "Transcribing...")
        job = components.transcriber_factory()
        job.submit(acquisition.remote_url, normalize_language(language))
        transcript = job.wait(
            interval=config.assemblyai.poll_interval,
            timeout=config.assemblyai.timeout,
            sleep=components.sleep,
        )
        result.transcript = transcript
        emit("transcribe", 1.0, "Transcription complete")

        if config.acquisition.delete_remote_after and acquisition.public_id and components.store:
            try:
                components.store.delete_asset(acquisition.public_id)
                console.print(f"[dim]Deleted remote asset:[/dim] {acquisition.public_id}")
            except StoreError as e:
                console.print(f"[yellow]Remote asset cleanup failed:[/yellow] {e}")

        # Step 3: Save the transcript subtitles
        emit("save", 0.0, "Writing subtitles...")
        subtitle_path = write_vtt(
            transcript.cues, output_dir, _source_stem(source), fallback_text=transcript.full_text
        )
        result.written.append(subtitle_path)
        result.subtitle_path = subtitle_path
        console.print(f"[green]Saved:[/green] {subtitle_path}")

        # Step 4: Optional translation
        if translate:
            hint = transcript.detected_language or language
            target = normalize_language(translate)
            if same_language(normalize_language(hint), target):
                console.print("[dim]Source matches target, reusing original subtitles.[/dim]")
                result.translation = TranslationOutcome(
                    cues=transcript.cues, source_lang_used=normalize_language(hint), skipped=True
                )
                result.translated_path = subtitle_path
            else:
                emit("translate", 0.0, f"Translating to {target}...")

                def _on_translate_progress(frac: float) -> None:
                    emit("translate", frac, f"Translating ({frac:.0%})...")

                outcome = components.translator.translate(
                    transcript.cues,
                    source_lang_hint=hint,
                    target_lang=translate,
                    on_progress=_on_translate_progress,
                )
                result.translation = outcome
                translated_path = write_vtt(
                    outcome.cues,
                    output_dir,
                    f"translated-{target}",
                    fallback_text=transcript.full_text if not outcome.cues else "",
                )
                result.written.append(translated_path)
                result.translated_path = translated_path
                console.print(f"[green]Saved:[/green] {translated_path}")
                emit("translate", 1.0, "Translation complete")

    except SubcastError as e:
        _discard_written(result)
        result.error = str(e)
        console.print(f"[red]Failed:[/red] {e}")
        emit("save", 1.0, "Failed", data={"error": str(e)})
        return result
    except BaseException:
        _discard_written(result)
        raise

    result.ok = True
    emit(
        "save",
        1.0,
        "Done",
        data={
            "subtitle_path": str(result.subtitle_path),
            "translated_path": str(result.translated_path) if result.translated_path else None,
        },
    )
    console.print("\n[bold green]Done![/bold green]")
    return result
