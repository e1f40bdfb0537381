"""
Tests for the typed domain wrappers.
"""

import pytest

from chromewire.protocol import (
    CloseTargetRequest,
    EvaluateRequest,
    EvaluateResponse,
    GetOuterHTMLRequest,
    GetOuterHTMLResponse,
    NavigateRequest,
    Node,
    ProtocolSurface,
)
from chromewire.cdp.dispatch import encode_params
from helpers import reply


class TestModels:
    """Wire naming of request/response models."""

    def test_request_uses_camel_case(self):
        request = EvaluateRequest(expression="1+1", return_by_value=True)
        assert encode_params(request) == {"expression": "1+1", "returnByValue": True}

    def test_irregular_alias(self):
        request = EvaluateRequest(expression="x", include_command_line_api=True)
        assert encode_params(request)["includeCommandLineAPI"] is True

    def test_response_decoding(self):
        response = EvaluateResponse.model_validate(
            {"result": {"type": "number", "value": 2, "description": "2"}}
        )
        assert response.result.value == 2
        assert response.exception_details is None

    def test_exception_details(self):
        response = EvaluateResponse.model_validate(
            {
                "result": {"type": "object", "subtype": "error"},
                "exceptionDetails": {
                    "exceptionId": 1,
                    "text": "Uncaught",
                    "lineNumber": 0,
                    "columnNumber": 5,
                },
            }
        )
        assert response.exception_details.text == "Uncaught"
        assert response.result.subtype == "error"

    def test_outer_html_alias(self):
        assert GetOuterHTMLResponse.model_validate({"outerHTML": "<p></p>"}).outer_html == "<p></p>"
        assert encode_params(GetOuterHTMLRequest(node_id=4)) == {"nodeId": 4}

    def test_nested_nodes(self):
        root = Node.model_validate(
            {
                "nodeId": 1,
                "nodeType": 9,
                "nodeName": "#document",
                "children": [{"nodeId": 2, "nodeType": 1, "nodeName": "HTML"}],
            }
        )
        assert root.children[0].node_name == "HTML"

    def test_unknown_fields_kept(self):
        node = Node.model_validate(
            {"nodeId": 1, "nodeType": 9, "nodeName": "#document", "documentURL": "about:blank"}
        )
        assert node.model_extra["documentURL"] == "about:blank"


class TestDomains:
    """Domain wrappers over a live session."""

    @pytest.mark.asyncio
    async def test_runtime_evaluate(self, transport, make_session):
        """Test evaluating 1+1 decodes the value 2."""
        transport.responder = lambda m: [reply(m, {"result": {"type": "number", "value": 2}})]
        session = await make_session()
        protocol = ProtocolSurface(session)

        response = await protocol.runtime.evaluate(EvaluateRequest(expression="1+1"))

        assert transport.sent[0]["method"] == "Runtime.evaluate"
        assert transport.sent[0]["params"] == {"expression": "1+1"}
        assert response.result.value == 2
        await session.close()

    @pytest.mark.asyncio
    async def test_page_and_target(self, transport, make_session):
        responses = {
            "Page.navigate": {"frameId": "F1", "loaderId": "L1"},
            "Target.closeTarget": {},
            "Target.getTargets": {
                "targetInfos": [
                    {"targetId": "T1", "type": "page", "title": "", "url": "about:blank", "attached": True}
                ]
            },
            "Browser.getVersion": {
                "protocolVersion": "1.3",
                "product": "Chrome/120",
                "revision": "@abc",
                "userAgent": "UA",
                "jsVersion": "12.0",
            },
        }
        transport.responder = lambda m: [reply(m, responses[m["method"]])]
        session = await make_session()
        protocol = ProtocolSurface(session)

        navigated = await protocol.page.navigate(NavigateRequest(url="about:blank"))
        closed = await protocol.target.close_target(CloseTargetRequest(target_id="T1"))
        targets = await protocol.target.get_targets()
        version = await protocol.browser.get_version()

        assert navigated.frame_id == "F1"
        assert closed.success is True
        assert targets.target_infos[0].target_id == "T1"
        assert version.js_version == "12.0"
        assert transport.sent[1]["params"] == {"targetId": "T1"}
        assert "params" not in transport.sent[2]
        await session.close()

    @pytest.mark.asyncio
    async def test_dom_document(self, transport, make_session):
        responses = {
            "DOM.getDocument": {"root": {"nodeId": 1, "nodeType": 9, "nodeName": "#document"}},
            "DOM.getOuterHTML": {"outerHTML": "<html></html>"},
        }
        transport.responder = lambda m: [reply(m, responses[m["method"]])]
        session = await make_session()
        protocol = ProtocolSurface(session)

        document = await protocol.dom.get_document()
        html = await protocol.dom.get_outer_html(GetOuterHTMLRequest(node_id=document.root.node_id))

        assert html.outer_html == "<html></html>"
        assert transport.sent[1]["params"] == {"nodeId": 1}
        await session.close()
