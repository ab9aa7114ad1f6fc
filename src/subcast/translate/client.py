"""LLM chat completion via LiteLLM, with Ollama auto-pull support."""

from __future__ import annotations

from subcast.utils.console import console


def _extract_ollama_model(model: str) -> str | None:
    """Extract the Ollama model name from a LiteLLM model string.

    Returns None if the model is not served by Ollama.
    E.g. "ollama_chat/qwen3:8b" -> "qwen3:8b"
    """
    for prefix in ("ollama_chat/", "ollama/"):
        if model.startswith(prefix):
            return model[len(prefix) :]
    return None


def ensure_ollama_model(model: str) -> None:
    """Pull the Ollama model if not already available locally.

    No-op if the model is not an Ollama model or if the ollama package is
    not installed.
    """
    model_name = _extract_ollama_model(model)
    if model_name is None:
        return

    try:
        import ollama
    except ImportError:
        return

    try:
        available = {m.model for m in ollama.list().models}
    except Exception as e:
        console.print(f"[yellow]Could not list Ollama models:[/yellow] {e}")
        return

    if model_name in available or f"{model_name}:latest" in available:
        return

    console.print(f"[bold]Pulling Ollama model:[/bold] {model_name}")
    ollama.pull(model_name)
    console.print(f"[green]Model ready:[/green] {model_name}")


def complete(
    messages: list[dict[str, str]],
    model: str,
    api_base: str | None = None,
    temperature: float = 0.3,
    max_tokens: int = 1024,
    **kwargs: object,
) -> str:
    """Send a chat completion request via LiteLLM and return the reply text."""
    try:
        from litellm import completion
    except ImportError:
        raise ImportError("LiteLLM is not installed. Install with: pip install 'subcast[llm]'")

    ensure_ollama_model(model)

    response = completion(
        model=model,
        messages=messages,
        api_base=api_base,
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )
    return response.choices[0].message.content or ""
