from .audit import handle_audit
from .convert import handle_convert, _convert_single_file, _print_batch_summary
