import os, sys, json, argparse, logging
from pydantic import ValidationError
current_dir = os.path.dirname(os.path.abspath(__file__))
repo_root = os.path.abspath(os.path.join(current_dir, ".."))
sys.path.insert(0, repo_root)

from Generate.params import BuildingParams
from Generate.orchestrator import generate_building
from geometry.exporters import building_to_dict
from evaluation.validators import validate_building

log = logging.getLogger(__name__)


class LayoutValidationError(RuntimeError):
    """Raised in strict mode when the generated building fails validation."""


def main():
    ap = argparse.ArgumentParser(description="Generate a multi-floor building layout")
    ap.add_argument("--params_json", type=str, required=True)
    ap.add_argument("--out_prefix", type=str, default="generated_building")
    ap.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for candidate shuffling and room size choice (overrides params.seed)",
    )
    ap.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of writing output when validation finds issues",
    )
    ap.add_argument(
        "--issues_log",
        type=str,
        default=None,
        help="Optional path to append validation issues as JSON lines",
    )
    ap.add_argument(
        "--log_level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = ap.parse_args()
    logging.getLogger().setLevel(args.log_level)

    try:
        with open(args.params_json, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error("Failed to read params file %s: %s", args.params_json, e)
        sys.exit(1)

    try:
        params = BuildingParams.model_validate(raw)
    except ValidationError as e:
        log.error("Invalid parameters: %s", e)
        sys.exit(1)

    if params.dimensions.height % params.floorHeight:
        log.warning("Building height %d is not a multiple of floor height %d; top %d units unused",
                    params.dimensions.height, params.floorHeight,
                    params.dimensions.height % params.floorHeight)

    layout = generate_building(params, seed=args.seed)
    data = building_to_dict(layout)

    issues = validate_building(data)
    if issues and args.issues_log:
        try:
            with open(args.issues_log, "a", encoding="utf-8") as fh:
                json.dump({"building": params.name, "seed": layout.seed, "issues": issues}, fh)
                fh.write("\n")
        except OSError as exc:
            log.warning("Failed to append issues to %s: %s", args.issues_log, exc)
    if issues:
        if args.strict:
            raise LayoutValidationError("; ".join(issues))
        log.warning("Layout has %d validation issues: %s", len(issues), "; ".join(issues[:3]))

    json_path = f"{args.out_prefix}.json"
    out_dir = os.path.dirname(json_path)
    try:
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        log.error("Failed to write layout JSON to %s: %s", json_path, e)
        sys.exit(1)
    rooms = sum(len(fl["rooms"]) for fl in data["floors"])
    print(f"Wrote {json_path} ({len(data['floors'])} floors, {rooms} rooms)")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    try:
        main()
    except LayoutValidationError as exc:
        log.error("Building generation failed validation: %s", exc)
        sys.exit(1)
