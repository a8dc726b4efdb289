from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from time import perf_counter
from typing import Callable

from . import (
    citation_rules,
    config,
    formatting_rules,
    heading_rules,
    quotation_rules,
    structure_rules,
)
from .extractor import Source, ValidationLogState, extract_document, source_name
from .models import DocumentModel, Issue, Report, Summary
from .style_guide import StyleGuide, resolve_document_type, resolve_style_guide

RuleCheck = Callable[[DocumentModel, str, StyleGuide], list[Issue]]

RULE_MODULES: tuple[tuple[str, RuleCheck], ...] = (
    ("formatting", formatting_rules.check),
    ("citations", citation_rules.check),
    ("structure", structure_rules.check),
    ("quotations", quotation_rules.check),
    ("headings", heading_rules.check),
)


class StyleValidator:
    def __init__(
        self,
        style_guide: StyleGuide | str | None = None,
        write_log: bool = True,
        max_workers: int | None = None,
    ) -> None:
        if isinstance(style_guide, StyleGuide):
            self.style_guide = style_guide
        else:
            self.style_guide = resolve_style_guide(style_guide)
        self.write_log = write_log
        self.max_workers = max_workers
        self._last_log_state: ValidationLogState | None = None

    @property
    def last_log_state(self) -> ValidationLogState | None:
        return self._last_log_state

    def validate(
        self,
        source: Source,
        document_type: str | None = config.DEFAULT_DOCUMENT_TYPE,
        file_name: str | None = None,
    ) -> Report:
        started = perf_counter()
        name = file_name if file_name is not None else source_name(source)
        doc_type = resolve_document_type(document_type)
        log_state = ValidationLogState(
            source_name=name,
            start_time=datetime.now(),
            document_type=doc_type,
            style_guide_key=self.style_guide.key,
        )
        try:
            model = extract_document(source, log_state)
            report = self._run_rules(model, doc_type, name, log_state)
        except Exception as exc:
            log_state.error = str(exc)
            log_state.elapsed_sec = perf_counter() - started
            self._finish(log_state)
            raise
        log_state.elapsed_sec = perf_counter() - started
        self._finish(log_state)
        return report

    def extract(self, source: Source) -> DocumentModel:
        return extract_document(source)

    def check(
        self,
        model: DocumentModel,
        document_type: str | None = config.DEFAULT_DOCUMENT_TYPE,
        file_name: str = "",
    ) -> Report:
        return self._run_rules(model, resolve_document_type(document_type), file_name, None)

    def _run_rules(
        self,
        model: DocumentModel,
        document_type: str,
        file_name: str,
        log_state: ValidationLogState | None,
    ) -> Report:
        workers = self.max_workers or len(RULE_MODULES)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                (name, executor.submit(rule, model, document_type, self.style_guide))
                for name, rule in RULE_MODULES
            ]
            # Merged in registry order, whatever order the modules finish in.
            issues: list[Issue] = []
            for name, future in futures:
                module_issues = future.result()
                if log_state is not None:
                    log_state.module_issue_counts[name] = len(module_issues)
                issues.extend(module_issues)
        return build_report(issues, document_type, file_name)

    def _finish(self, log_state: ValidationLogState) -> None:
        self._last_log_state = log_state
        if self.write_log:
            _write_log(log_state)


def sort_issues(issues: list[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda issue: (issue.severity.rank, issue.paragraph_index))


def build_report(issues: list[Issue], document_type: str, file_name: str) -> Report:
    ordered = sort_issues(issues)
    return Report(
        document_type=document_type,
        file_name=file_name,
        summary=Summary.from_issues(ordered),
        issues=tuple(ordered),
    )


def validate_document(
    source: Source,
    document_type: str | None = config.DEFAULT_DOCUMENT_TYPE,
    file_name: str | None = None,
    style_guide: StyleGuide | str | None = None,
) -> Report:
    validator = StyleValidator(style_guide=style_guide)
    return validator.validate(source, document_type=document_type, file_name=file_name)


def _write_log(log_state: ValidationLogState) -> None:
    log_path = config.build_log_path(log_state.start_time)
    lines = [
        f"source_name: {log_state.source_name}",
        f"elapsed_sec: {log_state.elapsed_sec:.3f}"
        if log_state.elapsed_sec is not None
        else "elapsed_sec: unknown",
        f"document_type: {log_state.document_type or 'unknown'}",
        f"style_guide: {log_state.style_guide_key or 'unknown'}",
        f"paragraph_count: {log_state.paragraph_count}",
        f"footnote_count: {log_state.footnote_count}",
        f"heading_count: {log_state.heading_count}",
    ]
    for name, count in log_state.module_issue_counts.items():
        lines.append(f"module_issues[{name}]: {count}")
    if log_state.error:
        lines.append(f"error: {log_state.error}")
    lines.append(f"warnings_count: {len(log_state.warnings)}")
    for warning in log_state.warnings:
        parts = [f"rule={warning.rule}", f"reason={warning.reason}"]
        if warning.part:
            parts.append(f"part={warning.part}")
        if warning.paragraph_index is not None:
            parts.append(f"paragraph_index={warning.paragraph_index}")
        lines.append("warning: " + " ".join(parts))
    # An unwritable log directory never changes the validation outcome.
    try:
        config.ensure_base_dirs()
        log_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError:
        return
