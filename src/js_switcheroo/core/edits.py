"""
Format-Preserving Source Splicing.

Rewrites are expressed as byte-range replacements against the original
UTF-8 source rather than by regenerating code from a tree. Everything outside
the recorded ranges is copied through verbatim, which keeps comments and
formatting intact.

Offsets are byte offsets because tree-sitter reports node positions in bytes.

Applying an `EditList` yields the new text together with an `OffsetMap`, which
translates offsets in the new text back to offsets in the text the edits were
recorded against. The engine chains these maps to report diagnostics against
the caller's input.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from js_switcheroo.core.errors import EditConflictError


@dataclass(frozen=True)
class Edit:
  """
  A single replacement of `source[start:end]` with `text`.

  Zero-width edits (`start == end`) are insertions; edits with empty `text`
  are removals.
  """

  start: int
  end: int
  text: str
  seq: int = 0


class OffsetMap:
  """
  Translates byte offsets in edited output back to the pre-edit source.

  Offsets that fall inside replacement text map to the start of the replaced
  range.
  """

  def __init__(self, spans: List[Tuple[int, int, int, int]]):
    """
    Args:
        spans: `(old_start, old_end, new_start, new_end)` tuples in ascending
            order, one per applied edit.
    """
    self._spans = spans
    self._new_starts = [span[2] for span in spans]

  def to_original(self, offset: int) -> int:
    """
    Maps an offset in the edited text to the corresponding source offset.

    Args:
        offset (int): Byte offset in the edited text.

    Returns:
        int: Byte offset in the text the edits were applied to.
    """
    idx = bisect_right(self._new_starts, offset) - 1
    if idx < 0:
      return offset
    old_start, old_end, new_start, new_end = self._spans[idx]
    if offset < new_end:
      return old_start
    return offset - new_end + old_end


class EditList:
  """
  An accumulating set of non-overlapping edits over one source buffer.

  Edits may be recorded in any order; they are applied in source order.
  Insertions at the same offset keep their recording order, and an insertion
  at the start of a replaced range lands before the replacement.
  """

  def __init__(self, source: bytes):
    self.source = source
    self._edits: List[Edit] = []

  def __len__(self) -> int:
    return len(self._edits)

  def replace(self, start: int, end: int, text: str) -> None:
    if start > end or start < 0 or end > len(self.source):
      raise EditConflictError(f"Invalid edit range [{start}, {end}) for source of length {len(self.source)}")
    self._edits.append(Edit(start, end, text, len(self._edits)))

  def insert(self, offset: int, text: str) -> None:
    self.replace(offset, offset, text)

  def remove(self, start: int, end: int) -> None:
    self.replace(start, end, "")

  def extend(self, edits: List[Edit]) -> None:
    for edit in edits:
      self.replace(edit.start, edit.end, edit.text)

  def sorted_edits(self) -> List[Edit]:
    """
    Returns the edits in application order, verifying they do not overlap.

    Returns:
        List[Edit]: Edits sorted by position.

    Raises:
        EditConflictError: If two edits claim overlapping ranges.
    """
    ordered = sorted(self._edits, key=lambda e: (e.start, e.end, e.seq))
    for prev, curr in zip(ordered, ordered[1:]):
      if curr.start < prev.end:
        raise EditConflictError(
          f"Edit [{curr.start}, {curr.end}) overlaps previous edit [{prev.start}, {prev.end})"
        )
    return ordered

  def apply(self) -> Tuple[str, OffsetMap]:
    """
    Produces the edited text.

    Returns:
        Tuple[str, OffsetMap]: The new source text and the map from new
        offsets back to offsets in `self.source`.
    """
    out = bytearray()
    spans: List[Tuple[int, int, int, int]] = []
    pos = 0
    for edit in self.sorted_edits():
      out += self.source[pos : edit.start]
      new_start = len(out)
      out += edit.text.encode("utf-8")
      spans.append((edit.start, edit.end, new_start, len(out)))
      pos = edit.end
    out += self.source[pos:]
    return out.decode("utf-8"), OffsetMap(spans)


def render_range(source: bytes, edits: Sequence[Edit], start: int, end: int) -> str:
  """
  Renders `source[start:end]` with the edits that fall inside that range.

  Used to preview a single rewrite for tracing; edits outside the range are
  ignored.

  Args:
      source (bytes): The unedited buffer.
      edits (Sequence[Edit]): Candidate edits.
      start (int): Range start.
      end (int): Range end.

  Returns:
      str: The edited slice.
  """
  pieces: List[str] = []
  pos = start
  inside = [e for e in edits if start <= e.start and e.end <= end]
  for edit in sorted(inside, key=lambda e: (e.start, e.end, e.seq)):
    pieces.append(source[pos : edit.start].decode("utf-8"))
    pieces.append(edit.text)
    pos = max(pos, edit.end)
  pieces.append(source[pos:end].decode("utf-8"))
  return "".join(pieces)
