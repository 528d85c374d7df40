"""
costlever - CLI Entry Point

Commands:
    estimate  - Compute an estimate for a selection file / preset
    presets   - List presets in display order
    rates     - Show the base hourly rates of a country
    visible   - List the levers a UI should render for a selection
"""

import argparse
import logging
import sys
from pathlib import Path

from . import SAMPLE_CONFIG
from .config import ConfigError, load_config, load_selections
from .engine import compute_estimate, visible_lever_id_set
from .models import COUNTRY_KEY, ROLES, BUILD_ROLES
from .pricing import get_country_base_rates
from .reporting import export_to_excel, export_to_json
from .selections import apply_preset, default_selections, ordered_presets

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _config_paths(args):
    return args.config or [SAMPLE_CONFIG]


def _build_selections(config, args):
    """Defaults, then the selections file, then preset and country flags."""
    selections = default_selections(config)
    if getattr(args, 'selections', None):
        selections.update(load_selections(Path(args.selections)))
    if getattr(args, 'preset', None):
        if config.get_preset(args.preset) is None:
            print(f"Unknown preset: {args.preset}")
        selections = apply_preset(config, selections, args.preset)
    if getattr(args, 'country', None):
        selections[COUNTRY_KEY] = args.country
    return selections


def cmd_estimate(args):
    """Compute and print an estimate."""
    config = load_config(*_config_paths(args))
    selections = _build_selections(config, args)

    result = compute_estimate(config, selections)
    sym = result.currency_symbol

    print(f"\n{'='*60}")
    print(f"ESTIMATE ({result.currency})")
    print(f"{'='*60}")
    print(f"{'Role':<12} {'Hours':>10} {'Rate':>10} {'Cost':>12}")
    print("-" * 48)
    for role in ROLES:
        print(f"{role:<12} {result.hours_by_role[role]:>10g} "
              f"{result.debug.rates.get(role, 0):>10g} {result.cost_by_role[role]:>12g}")
    print("-" * 48)
    print(f"Build subtotal: {result.subtotal_hours:g}h / {sym}{result.subtotal_cost:g}")
    print(f"PM overhead:    {result.overheads.pm_hours:g}h / {sym}{result.overheads.pm_cost:g}")
    print(f"QA overhead:    {result.overheads.qa_hours:g}h / {sym}{result.overheads.qa_cost:g}")
    print(f"P50:            {result.p50.hours:g}h / {sym}{result.p50.cost:g}")
    print(f"P80:            {result.p80.hours:g}h / {sym}{result.p80.cost:g} "
          f"(risk {result.debug.risk_level}, +{result.debug.risk_pct:.0%})")
    if not result.tax.vat_included:
        print(f"P50 incl. VAT:  {sym}{result.tax.p50_gross_cost:g} ({result.tax.vat_percent:g}%)")

    if result.debug.anomalies:
        print(f"\nAnomalies ({len(result.debug.anomalies)}):")
        for anomaly in result.debug.anomalies:
            print(f"  - [{anomaly.code}] {anomaly.message}")

    if args.json:
        export_to_json(result, Path(args.json))
        print(f"\nJSON saved to: {args.json}")
    if args.excel:
        export_to_excel(result, Path(args.excel))
        print(f"Excel saved to: {args.excel}")

    return 0


def cmd_presets(args):
    """List presets."""
    config = load_config(*_config_paths(args))

    presets = ordered_presets(config)
    if not presets:
        print("No presets configured")
        return 0

    print(f"\n{'ID':<30} {'Country':<10} {'Values':<8} {'Label':<30}")
    print("-" * 80)
    for preset in presets:
        print(f"{preset.id:<30} {preset.country or '-':<10} {len(preset.values):<8} {preset.label:<30}")
    return 0


def cmd_rates(args):
    """Show base rates of a country."""
    config = load_config(*_config_paths(args))

    country = config.get_country(args.country)
    if country is None:
        print(f"Unknown country {args.country}, showing {config.default_country.code}")
        country = config.default_country

    base = get_country_base_rates(config, country.code)
    print(f"\nRates: {country.code} ({country.currency})")
    print("-" * 40)
    for role in ROLES:
        kind = "" if role in BUILD_ROLES else " (overhead)"
        print(f"  {role:<10} {base[role]:>10g}{kind}")
    return 0


def cmd_visible(args):
    """List visible levers for a selection."""
    config = load_config(*_config_paths(args))
    selections = _build_selections(config, args)

    visible = visible_lever_id_set(config, selections)
    for lever in config.levers:
        mark = "✓" if lever.id in visible else "✗"
        print(f"  {mark} {lever.id:<30} {lever.label}")
    print(f"\n{len(visible)}/{len(config.levers)} levers visible")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="costlever - project cost estimation engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Estimate with the sample configuration and a preset
  python -m costlever estimate --preset offerte_simple_website

  # Estimate a saved selection, billed in France, exported to Excel
  python -m costlever estimate --config levers.yaml --config countries.yaml \\
      --selections quote.yaml --country FR --excel out/quote.xlsx

  # Which levers are on screen for a selection
  python -m costlever visible --selections quote.yaml
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Estimate command
    est_parser = subparsers.add_parser('estimate', help='Compute an estimate')
    est_parser.add_argument('--config', '-c', action='append',
                            help='Config file (repeatable; default: rules/sample_config.yaml)')
    est_parser.add_argument('--selections', '-s',
                            help='Selections file (YAML/JSON)')
    est_parser.add_argument('--preset', '-p',
                            help='Preset id applied over the selections')
    est_parser.add_argument('--country',
                            help='Country code overriding the selections')
    est_parser.add_argument('--json',
                            help='Write the result as JSON')
    est_parser.add_argument('--excel',
                            help='Write the result as Excel')
    est_parser.set_defaults(func=cmd_estimate)

    # Presets command
    presets_parser = subparsers.add_parser('presets', help='List presets')
    presets_parser.add_argument('--config', '-c', action='append',
                                help='Config file (repeatable)')
    presets_parser.set_defaults(func=cmd_presets)

    # Rates command
    rates_parser = subparsers.add_parser('rates', help='Show country rates')
    rates_parser.add_argument('--config', '-c', action='append',
                              help='Config file (repeatable)')
    rates_parser.add_argument('--country', required=True,
                              help='Country code')
    rates_parser.set_defaults(func=cmd_rates)

    # Visible command
    visible_parser = subparsers.add_parser('visible', help='List visible levers')
    visible_parser.add_argument('--config', '-c', action='append',
                                help='Config file (repeatable)')
    visible_parser.add_argument('--selections', '-s',
                                help='Selections file (YAML/JSON)')
    visible_parser.add_argument('--preset', '-p',
                                help='Preset id applied over the selections')
    visible_parser.set_defaults(func=cmd_visible)

    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
