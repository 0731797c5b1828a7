"""JavaScript helpers bundled ahead of every compiled Vie program."""

from __future__ import annotations

PRELUDE: str = """\
function độ_dài(obj) {
  if (typeof obj === 'string' || Array.isArray(obj)) {
    return obj.length;
  }
  console.error("Lỗi: độ_dài() chỉ áp dụng cho chuỗi hoặc mảng.");
  return null;
}

function kiểu_của(value) {
  if (value === null) return "rỗng";
  return typeof value;
}

function thành_chuỗi(value) {
  return String(value);
}
"""

# Names the generated code may call without declaring them.
PRELUDE_FUNCTIONS: tuple[str, ...] = ("độ_dài", "kiểu_của", "thành_chuỗi")


def wrap_program(code: str) -> str:
    """Prepend the prelude and run `code` inside an async IIFE.

    The wrapper makes a top-level `trả_về` legal in the emitted JavaScript.
    """
    return PRELUDE + "\n// Compiled Vie program\n(async () => {\n" + code + "\n})();\n"
