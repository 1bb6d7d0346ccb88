"""
Exporter facade.

ModelExporter borrows one Model and turns it into LP or MPS text. Each
export call:

1. runs setup() to build a fresh ExportContext (variable counts),
2. resolves variable and constraint names (obfuscated or sanitized),
3. for MPS, asks the format selector whether the fixed layout is possible,
   silently falling back to free format when it is not,
4. hands the context to the writer.

Writers abort with ExportError; the facade turns it into a failed
ExportResult whose text is None.

Usage:
    >>> from mpexport import ModelExporter
    >>> exporter = ModelExporter(model)
    >>> result = exporter.export_as_mps_format(fixed_format=True)
    >>> if result.is_ok:
    ...     print(result.text)
"""

import logging
from typing import Optional

from mpexport.config import ExportConfig, config as global_config
from mpexport.core.model import Model
from mpexport.export import lp, mps
from mpexport.export.context import ExportContext, ExportOptions, setup
from mpexport.export.names import FORBIDDEN_CHARS, can_use_fixed_mps_format, resolve_names
from mpexport.export.result import ExportError, ExportResult, ExportStatus

logger = logging.getLogger(__name__)


class ModelExporter:
    """
    Exports a borrowed Model as LP or MPS text.

    The exporter never modifies the model, and keeps no state between
    calls: every export builds its own ExportContext. The model must not be
    mutated while an export runs. Exporters cannot be copied.

    Attributes:
        model: The borrowed model
        config: Configuration the default options are taken from

    Example:
        >>> exporter = ModelExporter(model)
        >>> lp_result = exporter.export_as_lp_format(obfuscated=True)
        >>> lp_result.variable_names[:2]
        ['V1', 'V2']
    """

    def __init__(self, model: Model, config: Optional[ExportConfig] = None):
        """
        Initialize the exporter.

        Args:
            model: The model to export (borrowed, never modified)
            config: Configuration for default options (default: global config)
        """
        self._model = model
        self._config = config if config is not None else global_config

    def __copy__(self):
        raise TypeError("ModelExporter cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("ModelExporter cannot be copied")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def model(self) -> Model:
        return self._model

    @property
    def config(self) -> ExportConfig:
        return self._config

    # =========================================================================
    # Public API
    # =========================================================================

    def export_as_lp_format(
        self,
        obfuscated: bool = False,
        options: Optional[ExportOptions] = None,
    ) -> ExportResult:
        """
        Export the model in CPLEX LP format.

        Args:
            obfuscated: Use "V<i>" / "C<i>" names instead of the model's names
            options: Full option set (replaces `obfuscated` when given)

        Returns:
            ExportResult with the LP text, or a failure status
        """
        if options is None:
            options = self._config.default_options(obfuscate=obfuscated)
        ctx = setup(self._model, options)
        self._resolve_names(
            ctx, lp.reserved_names(ctx), lp.FORBIDDEN_CHARS, lp.KEYWORDS
        )

        try:
            text = lp.LpFormatWriter(ctx).write()
        except ExportError as e:
            logger.error("LP export failed: %s", e)
            return ExportResult.failure(e, "LP")

        return self._result(ctx, text, "LP")

    def export_as_mps_format(
        self,
        fixed_format: bool = False,
        obfuscated: bool = False,
        options: Optional[ExportOptions] = None,
    ) -> ExportResult:
        """
        Export the model in MPS format.

        The fixed layout is used when requested and every name fits in 8
        characters; otherwise the free layout is used.

        Args:
            fixed_format: Request the fixed MPS layout
            obfuscated: Use "V<i>" / "C<i>" names instead of the model's names
            options: Full option set (replaces both flags when given)

        Returns:
            ExportResult with the MPS text, or a failure status
            (MAXIMIZATION_NOT_SUPPORTED for maximizing models)
        """
        if options is None:
            options = self._config.default_options(
                obfuscate=obfuscated, fixed_format=fixed_format
            )

        ctx = setup(self._model, options)
        self._resolve_names(ctx, mps.reserved_names(ctx))

        ctx.use_fixed_mps_format = options.fixed_format and can_use_fixed_mps_format(ctx)
        if options.fixed_format and not ctx.use_fixed_mps_format:
            logger.info(
                "Names longer than %d characters, using free MPS format",
                options.fixed_mps_name_length,
            )

        try:
            text = mps.MpsFormatWriter(ctx).write()
        except ExportError as e:
            logger.error("MPS export failed: %s", e)
            return ExportResult.failure(e, "MPS")

        format_name = "MPS (fixed)" if ctx.use_fixed_mps_format else "MPS (free)"
        return self._result(ctx, text, format_name)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _resolve_names(
        self,
        ctx: ExportContext,
        reserved,
        forbidden_chars=FORBIDDEN_CHARS,
        keywords=(),
    ) -> None:
        reserved_variables, reserved_constraints = reserved
        options = ctx.options
        variables = resolve_names(
            self._model.variables, "V", options.obfuscate, options.max_name_length,
            reserved_variables, options.log_invalid_names, forbidden_chars, keywords,
        )
        constraints = resolve_names(
            self._model.constraints, "C", options.obfuscate, options.max_name_length,
            reserved_constraints, options.log_invalid_names, forbidden_chars, keywords,
        )
        ctx.variable_names = variables.names
        ctx.constraint_names = constraints.names
        ctx.max_name_length_seen = max(variables.max_length, constraints.max_length)

    @staticmethod
    def _result(ctx: ExportContext, text: str, format_name: str) -> ExportResult:
        return ExportResult(
            status=ExportStatus.OK,
            text=text,
            format_name=format_name,
            use_fixed_mps_format=ctx.use_fixed_mps_format,
            variable_names=list(ctx.variable_names),
            constraint_names=list(ctx.constraint_names),
            counts=ctx.counts,
        )


def export_model_as_lp_format(
    model: Model,
    obfuscated: bool = False,
    options: Optional[ExportOptions] = None,
) -> ExportResult:
    """Export `model` in LP format with a throwaway ModelExporter."""
    return ModelExporter(model).export_as_lp_format(obfuscated, options)


def export_model_as_mps_format(
    model: Model,
    fixed_format: bool = False,
    obfuscated: bool = False,
    options: Optional[ExportOptions] = None,
) -> ExportResult:
    """Export `model` in MPS format with a throwaway ModelExporter."""
    return ModelExporter(model).export_as_mps_format(fixed_format, obfuscated, options)
