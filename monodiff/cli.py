import argparse
import os
import os.path
import sys

import monodiff
from monodiff.analyzer.change_impact_analyzer import ChangeImpactAnalyzer
from monodiff.schema.errors import ArgumentError, MonodiffError
from monodiff.schema.schema import ImpactReport, MonodiffParams, OutputFormat
from monodiff.utils.log_util import log
from monodiff.utils.rich_console import display_error


def main(argv: list[str] | None = None) -> None:
    """メイン処理(args前処理、パラメータ設定、分析、出力)"""
    log("========================================")
    log("||         monodiff cli start         ||")
    log("========================================")
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.version:  # バージョン情報表示オプションが指定された場合
        show_version_and_exit()

    show_args(args)

    try:
        params = prepare_params(args)
        report = main_exec(params)
    except MonodiffError as e:
        show_error_and_exit(e)

    print(report.render(params.output_format))


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monodiff",
        description="2つのgit refの差分から、変更されたパッケージと推移的に影響を受けるパッケージを表示します",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--from", dest="from_ref", help="比較元のgit ref(必須, 例: --from main)", default="")
    parser.add_argument("--to", dest="to_ref", help="比較先のgit ref", default="HEAD")
    parser.add_argument("--root", help="リポジトリルート", default=".")
    parser.add_argument(
        "--format",
        dest="output_format",
        type=OutputFormat,
        choices=list(OutputFormat),
        help=OutputFormat.get_description(),
        default=OutputFormat.TEXT,
    )
    parser.add_argument("-v", "--version", action="store_true", help="バージョン情報を表示")
    return parser


def prepare_params(args: argparse.Namespace) -> MonodiffParams:
    """引数を検証してMonodiffParamsにする(作業を始める前に引数エラーを出す)"""
    if not args.from_ref:
        raise ArgumentError("--from is required (example: --from main)")
    for option, ref in (("--from", args.from_ref), ("--to", args.to_ref)):
        # "-"で始まるrefはgitにオプションとして解釈されてしまう
        if ref.startswith("-"):
            raise ArgumentError(f"{option} must be a git ref, not an option: {ref}")

    root = os.path.abspath(args.root)
    if not os.path.isdir(root):
        raise ArgumentError(f"failed to resolve root: {args.root} is not a directory")

    return MonodiffParams(from_ref=args.from_ref, to_ref=args.to_ref, root=root, output_format=args.output_format)


def main_exec(params: MonodiffParams) -> ImpactReport:
    """メイン処理(分析実行)"""
    log("command= %s", params.get_monodiff_command())
    analyzer = ChangeImpactAnalyzer(params.root)
    return analyzer.analyze(params.from_ref, params.to_ref)


def show_version_and_exit():
    print(f"monodiff version {monodiff.__version__}")
    sys.exit(0)


def show_error_and_exit(error: MonodiffError):
    display_error(str(error))
    if isinstance(error, ArgumentError):
        print("使用方法: monodiff --from <ref> [--to <ref>] [--root <path>] [--format text|json]", file=sys.stderr)
    sys.exit(1)


def show_args(args: argparse.Namespace):
    for arg, value in vars(args).items():
        if value:
            log(f"args.{arg}={value}")


if __name__ == "__main__":
    main()
