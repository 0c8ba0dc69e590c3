import ast
from pathlib import Path

import koszyk.receipt.ocr_parser as ocr_parser

OCR_PARSER_DIR = Path(ocr_parser.__file__).parent
IO_PACKAGES = {"httpx", "fastapi", "starlette", "google", "PIL", "uvicorn"}


def test_imports() -> None:
    import koszyk.application.receipts
    import koszyk.cli.main
    import koszyk.receipt.ocr_result_parser
    import koszyk.runtime.receipt_server

    assert koszyk.receipt.ocr_result_parser.parse_receipt_text is not None
    assert koszyk.runtime.receipt_server.app is not None
    assert koszyk.application.receipts.run_receipt_import is not None
    assert koszyk.cli.main.main is not None


def test_text_parser_has_no_io_dependencies() -> None:
    for module_path in sorted(OCR_PARSER_DIR.glob("*.py")):
        tree = ast.parse(module_path.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.module:
                names = [node.module]
            else:
                continue
            for name in names:
                assert name.split(".")[0] not in IO_PACKAGES, f"{module_path.name} imports {name}"
