"""Documentation URLs for names the JavaScript platform provides.

Used as a fallback after the configured link map, so that references to
``Promise``, ``Array``, ``URL`` or ``Partial`` resolve without a mapping.
"""

from __future__ import annotations

from typing import Optional

_JS_REFERENCE = "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects/"
_WEB_API = "https://developer.mozilla.org/en-US/docs/Web/API/"
_TS_UTILITY_TYPES = "https://www.typescriptlang.org/docs/handbook/utility-types.html"

JS_SUFFIXES = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".mts", ".cts", ".tsx")

ECMASCRIPT_GLOBALS = frozenset(
    {
        "AggregateError",
        "Array",
        "ArrayBuffer",
        "AsyncFunction",
        "AsyncGenerator",
        "AsyncGeneratorFunction",
        "AsyncIterator",
        "Atomics",
        "BigInt",
        "BigInt64Array",
        "BigUint64Array",
        "Boolean",
        "DataView",
        "Date",
        "Error",
        "EvalError",
        "FinalizationRegistry",
        "Float32Array",
        "Float64Array",
        "Function",
        "Generator",
        "GeneratorFunction",
        "Int16Array",
        "Int32Array",
        "Int8Array",
        "Intl",
        "Iterator",
        "JSON",
        "Map",
        "Math",
        "Number",
        "Object",
        "Promise",
        "Proxy",
        "RangeError",
        "ReferenceError",
        "Reflect",
        "RegExp",
        "Set",
        "SharedArrayBuffer",
        "String",
        "Symbol",
        "SyntaxError",
        "TypeError",
        "TypedArray",
        "URIError",
        "Uint16Array",
        "Uint32Array",
        "Uint8Array",
        "Uint8ClampedArray",
        "WeakMap",
        "WeakRef",
        "WeakSet",
        "globalThis",
    }
)

WEB_APIS = frozenset(
    {
        "AbortController",
        "AbortSignal",
        "Blob",
        "BroadcastChannel",
        "CanvasRenderingContext2D",
        "CustomEvent",
        "Document",
        "DOMException",
        "DOMMatrix",
        "DOMRect",
        "Element",
        "Event",
        "EventTarget",
        "File",
        "FileReader",
        "FormData",
        "GPUBuffer",
        "GPUCanvasContext",
        "GPUCommandEncoder",
        "GPUDevice",
        "GPURenderPassEncoder",
        "GPUTexture",
        "Headers",
        "HTMLCanvasElement",
        "HTMLElement",
        "HTMLImageElement",
        "ImageBitmap",
        "ImageData",
        "KeyboardEvent",
        "LockManager",
        "MessageChannel",
        "MessageEvent",
        "MessagePort",
        "MouseEvent",
        "Node",
        "OffscreenCanvas",
        "Performance",
        "PointerEvent",
        "ReadableStream",
        "Request",
        "RequestInit",
        "Response",
        "TextDecoder",
        "TextEncoder",
        "TransformStream",
        "URL",
        "URLSearchParams",
        "WebGL2RenderingContext",
        "WebGLBuffer",
        "WebGLProgram",
        "WebGLRenderingContext",
        "WebGLTexture",
        "WebSocket",
        "Window",
        "Worker",
        "WritableStream",
    }
)

TS_UTILITY_TYPES = frozenset(
    {
        "Awaited",
        "Capitalize",
        "ConstructorParameters",
        "Exclude",
        "Extract",
        "InstanceType",
        "Lowercase",
        "NoInfer",
        "NonNullable",
        "Omit",
        "OmitThisParameter",
        "Parameters",
        "Partial",
        "Pick",
        "Readonly",
        "Record",
        "Required",
        "ReturnType",
        "ThisParameterType",
        "ThisType",
        "Uncapitalize",
        "Uppercase",
    }
)


def builtin_url(reference: str) -> Optional[str]:
    """Return the documentation URL of a platform-provided name, if it is one.

    Members map onto their MDN sub-page: ``Promise.all`` and
    ``Array.prototype.map`` become ``Promise/all`` and ``Array/map``.
    """
    head, _, rest = reference.partition(".")
    members = [part for part in rest.split(".") if part and part != "prototype"]
    if head in ECMASCRIPT_GLOBALS:
        return _JS_REFERENCE + "/".join([head, *members])
    if head in WEB_APIS:
        return _WEB_API + "/".join([head, *members])
    if head in TS_UTILITY_TYPES and not members:
        return _TS_UTILITY_TYPES
    return None


def is_javascript_path(path: str) -> bool:
    return path.lower().endswith(JS_SUFFIXES)


__all__ = ["builtin_url", "is_javascript_path"]
