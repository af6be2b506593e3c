import httpx

from juris_assist import CompletionRequest, StructuredCompletionClient


API_KEY = "sk-or-test-key"


def chat_response(content, status_code=200):
    """Build an OpenAI-style chat completion envelope around `content`."""
    return httpx.Response(
        status_code,
        json={"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]},
    )


def make_client(handler) -> StructuredCompletionClient:
    """Client whose HTTP traffic goes to `handler` instead of the network."""
    return StructuredCompletionClient(api_key=API_KEY, transport=httpx.MockTransport(handler))


def make_request(**overrides) -> CompletionRequest:
    fields = {
        "prompt": "jurisprudência sobre dano moral",
        "system_instruction": "Você é um assistente jurídico.",
        "model": "qwen/qwen-2.5-72b-instruct",
        "deadline": 2.0,
    }
    fields.update(overrides)
    return CompletionRequest(**fields)


def responder_returning(text):
    """Responder for FakeCompletionClient that ignores its input."""

    def responder(messages, model):
        return text

    return responder
