import pytest

from apinodes.errors import ApiError
from apinodes.nodes.deepl import DeepLNode, TranslateConfig, translate_config_to_query
from apinodes.transport import TransportFailure, TransportResponse


def _make_node(transport, credentials, settings) -> DeepLNode:
    return DeepLNode(credentials, transport=transport, settings=settings)


def test_translate_config_only_copies_present_fields():
    assert translate_config_to_query(TranslateConfig(text="Hallo", target_lang="EN")) == {
        "text": "Hallo",
        "target_lang": "EN",
    }

    full = TranslateConfig(
        text="Hallo",
        target_lang="EN",
        source_lang="DE",
        split_sentences="nonewlines",
        preserve_formatting=False,
        formality="less",
    )
    assert translate_config_to_query(full) == {
        "text": "Hallo",
        "target_lang": "EN",
        "source_lang": "DE",
        "split_sentences": "nonewlines",
        "preserve_formatting": "0",
        "formality": "less",
    }


@pytest.mark.asyncio
async def test_translate(transport, credentials, settings):
    translations = [{"detected_source_language": "DE", "text": "Hello"}]
    transport.send.return_value = TransportResponse(200, {"translations": translations})
    node = _make_node(transport, credentials, settings)

    result = await node.translate(TranslateConfig(text="Hallo", target_lang="EN"))

    assert result == translations
    request = transport.send.call_args.args[0]
    assert request.method == "GET"
    assert request.url == "https://api.deepl.com/v2/translate"
    assert request.query == {"text": "Hallo", "target_lang": "EN", "auth_key": "deepl-key"}
    assert request.body is None


@pytest.mark.asyncio
async def test_get_languages(transport, credentials, settings):
    languages = [{"language": "DE", "name": "German"}]
    transport.send.return_value = TransportResponse(200, languages)
    node = _make_node(transport, credentials, settings)

    assert await node.get_languages("source") == languages
    assert transport.send.call_args.args[0].query["type"] == "source"


@pytest.mark.asyncio
async def test_error_message_is_prettified(transport, credentials, settings):
    transport.send.return_value = TransportFailure(
        403, '{"message":"Wrong endpoint"}', {"message": "Wrong endpoint"}
    )
    node = _make_node(transport, credentials, settings)

    with pytest.raises(ApiError, match=r"^DeepL error response \[403\]: Wrong endpoint$"):
        await node.translate(TranslateConfig(text="x", target_lang="EN"))


@pytest.mark.asyncio
async def test_health_check(transport, credentials, settings):
    node = _make_node(transport, credentials, settings)
    assert await node.health_check() is True

    transport.send.side_effect = Exception("Network error")
    assert await node.health_check() is False


def test_info(transport, credentials, settings):
    info = _make_node(transport, credentials, settings).get_info()
    assert info.name == "deepl"
    assert info.credential_type == "deepLApi"
    assert "translate" in info.operations
