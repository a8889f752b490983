"""Built-in API gateway policy catalog.

Each :class:`PolicySnippet` describes one policy element: a short
description, a template to insert, the attributes allowed on the element and
the attributes allowed on its documented sub-elements. Validation only uses
the top-level ``attributes``; sub-element attributes are reference material
for prompts and listings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class PolicySnippet:
    """Catalog entry for one policy element."""

    label: str
    documentation: str
    insert_text: str
    attributes: Tuple[str, ...] = ()
    sub_element_attributes: Dict[str, Tuple[str, ...]] = field(default_factory=dict)


_HEADER_SUBS = {
    "headers": (),
    "header": ("name", "exists-action"),
    "value": (),
    "body": (),
}

_PARAMETER_ACTIONS = ("specified-parameter-action", "unspecified-parameter-action")


POLICY_SNIPPETS: Tuple[PolicySnippet, ...] = (
    # Access restriction policies
    PolicySnippet(
        label="check-header",
        documentation="Enforces existence and/or value of an HTTP Header.",
        insert_text=(
            '<check-header name="header-name" failed-check-httpcode="http-status-code" '
            'failed-check-error-message="error-message">\n'
            "  <value>header-value</value>\n"
            "</check-header>"
        ),
        attributes=("name", "failed-check-httpcode", "failed-check-error-message"),
        sub_element_attributes={"value": ()},
    ),
    PolicySnippet(
        label="rate-limit",
        documentation="Prevents API usage spikes by limiting call rate, on a per subscription basis.",
        insert_text=(
            '<rate-limit calls="number-of-calls" renewal-period="renewal-period">\n'
            '  <api name="api-name" />\n'
            "</rate-limit>"
        ),
        attributes=("calls", "renewal-period"),
    ),
    PolicySnippet(
        label="ip-filter",
        documentation="Filters (allows/denies) calls from specific IP addresses and/or address ranges.",
        insert_text=(
            '<ip-filter action="allow-or-deny">\n'
            "  <address>ip-address-or-range</address>\n"
            "</ip-filter>"
        ),
        attributes=("action",),
        sub_element_attributes={"address": ()},
    ),
    PolicySnippet(
        label="quota",
        documentation=(
            "Allows you to enforce a renewable or lifetime call volume and/or bandwidth quota, "
            "on a per subscription basis."
        ),
        insert_text=(
            '<quota calls="number-of-calls" bandwidth="bandwidth-in-kilobytes" renewal-period="renewal-period">\n'
            '  <api name="api-name" />\n'
            "</quota>"
        ),
        attributes=("calls", "bandwidth", "renewal-period"),
        sub_element_attributes={"api": ("name",)},
    ),
    PolicySnippet(
        label="validate-jwt",
        documentation=(
            "Enforces existence and validity of a JWT extracted from either a specified HTTP Header, "
            "query parameter, or token value."
        ),
        insert_text=(
            '<validate-jwt header-name="header-name" failed-validation-httpcode="http-status-code" '
            'failed-validation-error-message="error-message">\n'
            '  <openid-config url="openid-config-url" />\n'
            "  <required-claims>\n"
            '    <claim name="claim-name" match="all-or-any">\n'
            "      <value>claim-value</value>\n"
            "    </claim>\n"
            "  </required-claims>\n"
            "</validate-jwt>"
        ),
        attributes=("header-name", "failed-validation-httpcode", "failed-validation-error-message"),
        sub_element_attributes={
            "openid-config": ("url",),
            "required-claims": (),
            "claim": ("name", "match"),
            "value": (),
        },
    ),
    # Advanced policies
    PolicySnippet(
        label="choose",
        documentation="Conditionally applies policy statements based on the results of the evaluation of Boolean expressions.",
        insert_text=(
            "<choose>\n"
            '  <when condition="boolean-expression">\n'
            "    <!-- Policy statements to apply if the above condition is true. -->\n"
            "  </when>\n"
            "  <otherwise>\n"
            "    <!-- Policy statements to apply if none of the above conditions are true. -->\n"
            "  </otherwise>\n"
            "</choose>"
        ),
        sub_element_attributes={"when": ("condition",), "otherwise": ()},
    ),
    PolicySnippet(
        label="mock-response",
        documentation="Aborts pipeline execution and returns a mocked response directly to the caller.",
        insert_text=(
            '<mock-response status-code="http-status-code" content-type="media-type">\n'
            "  <headers>\n"
            '    <header name="header-name" exists-action="override">\n'
            "      <value>value</value>\n"
            "    </header>\n"
            "  </headers>\n"
            "  <body>response-body</body>\n"
            "</mock-response>"
        ),
        attributes=("status-code", "content-type"),
        sub_element_attributes=dict(_HEADER_SUBS),
    ),
    PolicySnippet(
        label="retry",
        documentation="Retries execution of the enclosed policy statements, if and until the condition is met.",
        insert_text=(
            '<retry condition="boolean-expression" count="retry-count" interval="retry-interval">\n'
            "  <!-- Policy statements to retry. -->\n"
            "</retry>"
        ),
        attributes=("condition", "count", "interval", "delta", "max-interval", "first-fast-retry"),
    ),
    PolicySnippet(
        label="return-response",
        documentation="Aborts pipeline execution and returns the specified response directly to the caller.",
        insert_text=(
            "<return-response>\n"
            '  <status code="http-status-code" reason="reason-phrase" />\n'
            "  <headers>\n"
            '    <header name="header-name" exists-action="override">\n'
            "      <value>value</value>\n"
            "    </header>\n"
            "  </headers>\n"
            "  <body>response-body</body>\n"
            "</return-response>"
        ),
        sub_element_attributes={"status": ("code", "reason"), **_HEADER_SUBS},
    ),
    PolicySnippet(
        label="send-request",
        documentation="Sends a request to the specified URL.",
        insert_text=(
            '<send-request mode="new-or-copy" response-variable-name="response-variable">\n'
            "  <url>absolute-url</url>\n"
            "  <method>HTTP-verb</method>\n"
            "  <headers>\n"
            '    <header name="header-name" exists-action="override">\n'
            "      <value>value</value>\n"
            "    </header>\n"
            "  </headers>\n"
            "  <body>request-body</body>\n"
            "</send-request>"
        ),
        attributes=("mode", "response-variable-name"),
        sub_element_attributes={"url": (), "method": (), **_HEADER_SUBS},
    ),
    PolicySnippet(
        label="set-variable",
        documentation="Persists a value in a named context variable for later access.",
        insert_text='<set-variable name="variable-name" value="variable-value" />',
        attributes=("name", "value"),
    ),
    # Authentication policies
    PolicySnippet(
        label="authentication-basic",
        documentation="Authenticate with a backend service using Basic authentication.",
        insert_text='<authentication-basic username="username" password="password" />',
        attributes=("username", "password"),
    ),
    PolicySnippet(
        label="authentication-certificate",
        documentation="Authenticate with a backend service using client certificates.",
        insert_text='<authentication-certificate thumbprint="thumbprint" certificate-id="certificate-id" />',
        attributes=("thumbprint", "certificate-id"),
    ),
    # Caching policies
    PolicySnippet(
        label="cache-store",
        documentation="Caches response according to the specified cache control configuration.",
        insert_text='<cache-store duration="seconds" />',
        attributes=("duration",),
    ),
    PolicySnippet(
        label="cache-lookup",
        documentation="Perform cache lookup and return a valid cached response when available.",
        insert_text=(
            '<cache-lookup vary-by-developer="true-or-false" vary-by-developer-groups="true-or-false" '
            'downstream-caching-type="none-private-or-public">\n'
            "  <vary-by-header>header-name</vary-by-header>\n"
            "  <vary-by-query-parameter>parameter-name</vary-by-query-parameter>\n"
            "</cache-lookup>"
        ),
        attributes=("vary-by-developer", "vary-by-developer-groups", "downstream-caching-type"),
        sub_element_attributes={"vary-by-header": (), "vary-by-query-parameter": ()},
    ),
    # Cross-domain policies
    PolicySnippet(
        label="allow-cross-domain-calls",
        documentation="Makes the API accessible from Adobe Flash and Microsoft Silverlight browser-based clients.",
        insert_text="<cross-domain />",
    ),
    PolicySnippet(
        label="cors",
        documentation=(
            "Adds cross-origin resource sharing (CORS) support to an operation or an API to allow "
            "cross-domain calls from browser-based clients."
        ),
        insert_text=(
            '<cors allow-credentials="true-or-false">\n'
            "  <allowed-origins>\n"
            "    <origin>origin-url</origin>\n"
            "  </allowed-origins>\n"
            "  <allowed-methods>\n"
            "    <method>HTTP-verb</method>\n"
            "  </allowed-methods>\n"
            "  <allowed-headers>\n"
            "    <header>header-name</header>\n"
            "  </allowed-headers>\n"
            "  <expose-headers>\n"
            "    <header>header-name</header>\n"
            "  </expose-headers>\n"
            "</cors>"
        ),
        attributes=("allow-credentials",),
        sub_element_attributes={
            "allowed-origins": (),
            "origin": (),
            "allowed-methods": (),
            "method": (),
            "allowed-headers": (),
            "header": (),
            "expose-headers": (),
        },
    ),
    # Transformation policies
    PolicySnippet(
        label="json-to-xml",
        documentation="Converts request or response body from JSON to XML.",
        insert_text=(
            '<json-to-xml apply="always-or-content-type-json" consider-accept-header="true-or-false">\n'
            "  <output-xml-encoding>encoding</output-xml-encoding>\n"
            "</json-to-xml>"
        ),
        attributes=("apply", "consider-accept-header"),
        sub_element_attributes={"output-xml-encoding": ()},
    ),
    PolicySnippet(
        label="xml-to-json",
        documentation="Converts request or response body from XML to JSON.",
        insert_text='<xml-to-json kind="javascript-object-or-array" />',
        attributes=("kind",),
    ),
    PolicySnippet(
        label="find-and-replace",
        documentation="Finds a request or response substring and replaces it with a different substring.",
        insert_text='<find-and-replace from="original-string" to="replacement-string" />',
        attributes=("from", "to"),
    ),
    PolicySnippet(
        label="set-body",
        documentation="Sets the message body for incoming and outgoing requests.",
        insert_text="<set-body>new-body-value</set-body>",
    ),
    PolicySnippet(
        label="set-header",
        documentation=(
            "Assigns a value to an existing response and/or request header or adds a new response "
            "and/or request header."
        ),
        insert_text=(
            '<set-header name="header-name" exists-action="override">\n'
            "  <value>header-value</value>\n"
            "</set-header>"
        ),
        attributes=("name", "exists-action"),
        sub_element_attributes={"value": ()},
    ),
    PolicySnippet(
        label="set-query-parameter",
        documentation="Adds, replaces value of, or deletes request query string parameter.",
        insert_text=(
            '<set-query-parameter name="param-name" exists-action="override">\n'
            "  <value>parameter-value</value>\n"
            "</set-query-parameter>"
        ),
        attributes=("name", "exists-action"),
        sub_element_attributes={"value": ()},
    ),
    PolicySnippet(
        label="rewrite-uri",
        documentation=(
            "Converts a request URL from its public form to the form expected by the web service, "
            "as shown in the example below."
        ),
        insert_text='<rewrite-uri template="uri-template" />',
        attributes=("template",),
    ),
    # Validation policies
    PolicySnippet(
        label="validate-content",
        documentation="Validates the size or JSON schema of a request or response body against the API schema.",
        insert_text=(
            '<validate-content unspecified-content-type-action="ignore-or-prevent">\n'
            '  <content type="media-type" validate-as="json-or-xml" schema-id="schema-id" />\n'
            "</validate-content>"
        ),
        attributes=("unspecified-content-type-action",),
        sub_element_attributes={"content": ("type", "validate-as", "schema-id")},
    ),
    PolicySnippet(
        label="validate-parameters",
        documentation="Validates the request header, query, or path parameters against the API schema.",
        insert_text=(
            '<validate-parameters specified-parameter-action="ignore-or-prevent" '
            'unspecified-parameter-action="ignore-or-prevent">\n'
            '  <headers specified-parameter-action="ignore-or-prevent" '
            'unspecified-parameter-action="ignore-or-prevent" />\n'
            '  <query specified-parameter-action="ignore-or-prevent" '
            'unspecified-parameter-action="ignore-or-prevent" />\n'
            "</validate-parameters>"
        ),
        attributes=_PARAMETER_ACTIONS,
        sub_element_attributes={"headers": _PARAMETER_ACTIONS, "query": _PARAMETER_ACTIONS},
    ),
)


def find_snippet(label: str) -> Optional[PolicySnippet]:
    """Return the catalog entry for ``label`` or ``None``."""
    for snippet in POLICY_SNIPPETS:
        if snippet.label == label:
            return snippet
    return None


def _render_entry(snippet: PolicySnippet) -> str:
    line = f"- {snippet.label} - [{', '.join(snippet.attributes)}]"
    if snippet.sub_element_attributes:
        subs = ", ".join(f"{name}: [{', '.join(attrs)}]" for name, attrs in snippet.sub_element_attributes.items())
        line += f", {{{subs}}}"
    return line


def render_policy_reference(snippets: Tuple[PolicySnippet, ...] = POLICY_SNIPPETS) -> str:
    """Render the catalog for prompts, one ``- label - [attrs], {sub: [attrs]}`` line each."""
    return "\n".join(_render_entry(s) for s in snippets)


__all__ = ["PolicySnippet", "POLICY_SNIPPETS", "find_snippet", "render_policy_reference"]
