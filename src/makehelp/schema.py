from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from makehelp.lint.model import FixResult, LintWarning
from makehelp.model.types import HelpModel, Target
from makehelp.parsed import Directive, DirectiveType, ParsedFile


class DirectiveDTO(BaseModel):
    type: DirectiveType
    value: str = ""
    line: int


class ParsedFileDTO(BaseModel):
    path: str
    directives: List[DirectiveDTO] = []
    targets: Dict[str, int] = {}

    def to_parsed_file(self) -> ParsedFile:
        return ParsedFile(
            path=self.path,
            directives=[
                Directive(
                    type=item.type,
                    value=item.value,
                    source_file=self.path,
                    line_number=item.line,
                )
                for item in self.directives
            ],
            target_map=dict(self.targets),
        )


class AnalysisPayloadDTO(BaseModel):
    """Scanner output for an entry Makefile and everything it includes."""

    entry_makefile: Optional[str] = None
    files: List[ParsedFileDTO]
    phony_targets: List[str] = []
    has_recipe: List[str] = []
    dependencies: Dict[str, List[str]] = {}
    not_alias_marks: List[str] = []

    def to_parsed_files(self) -> List[ParsedFile]:
        return [item.to_parsed_file() for item in self.files]

    def phony_map(self) -> Dict[str, bool]:
        return {name: True for name in self.phony_targets}

    def recipe_map(self) -> Dict[str, bool]:
        return {name: True for name in self.has_recipe}

    def not_alias_map(self) -> Dict[str, bool]:
        return {name: True for name in self.not_alias_marks}


class VariableDTO(BaseModel):
    name: str
    description: str = ""


class TargetDTO(BaseModel):
    name: str
    aliases: List[str] = []
    summary: str = ""
    documentation: List[str] = []
    variables: List[VariableDTO] = []
    source_file: str = ""
    line_number: int = 0
    is_phony: bool = False

    @classmethod
    def from_target(cls, target: Target) -> "TargetDTO":
        return cls(
            name=target.name,
            aliases=list(target.aliases),
            summary=target.summary.markdown(),
            documentation=list(target.documentation),
            variables=[
                VariableDTO(name=variable.name, description=variable.description)
                for variable in target.variables
            ],
            source_file=target.source_file,
            line_number=target.line_number,
            is_phony=target.is_phony,
        )


class CategoryDTO(BaseModel):
    name: str
    targets: List[TargetDTO] = []


class FileDocDTO(BaseModel):
    source_file: str
    documentation: List[str] = []
    is_entry_point: bool = False


class HelpModelDTO(BaseModel):
    file_docs: List[FileDocDTO] = []
    categories: List[CategoryDTO] = []
    has_categories: bool = False
    default_category: str = ""

    @classmethod
    def from_model(cls, model: HelpModel) -> "HelpModelDTO":
        return cls(
            file_docs=[
                FileDocDTO(
                    source_file=doc.source_file,
                    documentation=list(doc.documentation),
                    is_entry_point=doc.is_entry_point,
                )
                for doc in model.file_docs
            ],
            categories=[
                CategoryDTO(
                    name=category.name,
                    targets=[TargetDTO.from_target(target) for target in category.targets],
                )
                for category in model.categories
            ],
            has_categories=model.has_categories,
            default_category=model.default_category,
        )


class WarningDTO(BaseModel):
    file: str
    line: int
    severity: str
    check: str
    message: str
    context: str = ""
    fixable: bool = False

    @classmethod
    def from_warning(cls, warning: LintWarning) -> "WarningDTO":
        return cls(
            file=warning.file,
            line=warning.line,
            severity=warning.severity.value,
            check=warning.check_name,
            message=warning.message,
            context=warning.context,
            fixable=warning.fixable,
        )


class FixResultDTO(BaseModel):
    total_fixed: int = 0
    files_modified: Dict[str, int] = {}
    dry_run: bool = False

    @classmethod
    def from_result(cls, result: FixResult, *, dry_run: bool = False) -> "FixResultDTO":
        return cls(
            total_fixed=result.total_fixed,
            files_modified=dict(result.files_modified),
            dry_run=dry_run,
        )


class LintResponseDTO(BaseModel):
    warnings: List[WarningDTO] = []
    fixable_count: int = 0
    fix: Optional[FixResultDTO] = None
    errors: List[str] = []
