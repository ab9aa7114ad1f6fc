"""Cue translation with source-language inference and provider fallback."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Callable

from rich.progress import Progress, SpinnerColumn, TextColumn

from subcast.core.config import TranslationConfig
from subcast.core.errors import TranslationError
from subcast.core.languages import AUTO, normalize_language, same_language
from subcast.core.models import Cue, TranslationOutcome, TranslationRequest
from subcast.translate.detect import infer_language
from subcast.translate.providers import TranslationProvider
from subcast.utils.console import console


class TranslationEngine:
    """Translate cues one at a time through a primary provider and mirrors.

    A cue whose every provider fails keeps its original text; one bad cue
    never aborts the batch. Cue order, count and timing are preserved.
    """

    def __init__(
        self,
        primary: TranslationProvider,
        mirrors: Sequence[TranslationProvider] = (),
        config: TranslationConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.primary = primary
        self.mirrors = list(mirrors)
        self.config = config or TranslationConfig()
        self.sleep = sleep

    def resolve_source(self, cues: Sequence[Cue], hint: str | None = AUTO) -> str:
        """Pick the source language, overriding an absent or suspicious hint.

        Script votes over the first cues replace the hint only when the hint
        is "auto" or one of the configured suspicious defaults, and only if
        the vote winner differs from it.
        """
        source = normalize_language(hint)
        suspicious = {s.lower() for s in self.config.suspicious_sources}
        if source != AUTO and source.lower() not in suspicious:
            return source

        inferred = infer_language((cue.text for cue in cues), self.config.sample_size)
        if inferred and inferred != source:
            console.print(f"[dim]Inferred source language '{inferred}' from text script[/dim]")
            return inferred
        return source

    def translate_text(self, text: str, source: str, target: str) -> str:
        """Translate one text, falling back through mirrors, then to the original.

        Errors and empty replies count as a miss, as does a mirror that
        echoes the input back unchanged.
        """
        for i, provider in enumerate((self.primary, *self.mirrors)):
            try:
                translated = provider.translate(text, source, target)
            except Exception as e:
                console.print(f"[yellow]{provider.name} failed:[/yellow] {e}")
                continue
            if not translated or not str(translated).strip():
                console.print(f"[yellow]{provider.name} returned an empty translation[/yellow]")
                continue
            if i > 0 and str(translated).strip() == text.strip():
                console.print(f"[yellow]{provider.name} echoed the source text[/yellow]")
                continue
            return str(translated)
        console.print("[yellow]All providers failed, keeping original text[/yellow]")
        return text

    def translate(
        self,
        cues: Sequence[Cue],
        source_lang_hint: str | None = AUTO,
        target_lang: str | None = None,
        on_progress: Callable[[float], None] | None = None,
    ) -> TranslationOutcome:
        """Translate cue texts into ``target_lang``.

        Args:
            cues: Cues to translate, in order.
            source_lang_hint: Declared source language, or "auto".
            target_lang: Target language code or name.
            on_progress: Optional callback receiving progress (0.0 to 1.0).

        Returns:
            TranslationOutcome with one cue per input cue. When source and
            target are the same language the input cues are returned as-is
            and no provider is called.

        Raises:
            TranslationError: Missing or unrecognized target, or cues that are
                not a sequence of Cue objects.
        """
        if isinstance(cues, (str, bytes)) or not isinstance(cues, Sequence):
            raise TranslationError("cues must be a sequence of Cue objects")
        if any(not isinstance(cue, Cue) for cue in cues):
            raise TranslationError("cues must be a sequence of Cue objects")
        if not target_lang or not str(target_lang).strip():
            raise TranslationError("Target language is required")
        target = normalize_language(target_lang)
        if target == AUTO:
            raise TranslationError(f"Unrecognized target language: {target_lang!r}")

        source = self.resolve_source(cues, source_lang_hint)

        if same_language(source, target):
            console.print(f"[dim]Source and target are both '{target}', skipping translation[/dim]")
            return TranslationOutcome(cues=tuple(cues), source_lang_used=source, skipped=True)
        if not cues:
            return TranslationOutcome(cues=(), source_lang_used=source)

        console.print(f"[bold]Translating {len(cues)} cues {source} -> {target}[/bold]")
        translated: list[Cue] = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TextColumn("{task.completed}/{task.total} cues"),
            console=console,
        ) as progress:
            task = progress.add_task("Translating subtitles", total=len(cues))

            for i, cue in enumerate(cues):
                if i > 0 and self.config.delay > 0:
                    self.sleep(self.config.delay)

                # Skip blank cues, don't send them to providers
                if cue.text.strip():
                    new_text = self.translate_text(cue.text, source, target)
                else:
                    new_text = cue.text
                translated.append(cue.with_text(new_text))

                progress.advance(task)
                if on_progress:
                    on_progress((i + 1) / len(cues))

        console.print(f"[green]Translation complete:[/green] {len(translated)} cues")
        return TranslationOutcome(cues=tuple(translated), source_lang_used=source)

    def translate_request(self, request: TranslationRequest) -> TranslationOutcome:
        return self.translate(request.cues, request.source_lang_hint, request.target_lang)
