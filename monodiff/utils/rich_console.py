from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from monodiff.schema.schema import Workspace

# 標準出力はレポート専用なので、コンソール表示は全てstderrに出す
console = Console(stderr=True)


class StepInfo(BaseModel):
    description: str = Field(default="", description="スピナーに表示する処理内容")
    error_message: str = Field(default="", description="失敗時に表示するメッセージ")


def run_function_with_spinner(step_info: StepInfo, func: Callable[..., Any], *args, **kwargs) -> Any:
    """
    指定された関数を実行し、その間スピナーを表示します。
    例外は表示した上でそのまま送出します。

    :param step_info: StepInfo
    :param func: 実行する関数
    :param args: 関数に渡す位置引数
    :param kwargs: 関数に渡すキーワード引数
    :return: 関数の戻り値
    """
    with console.status(f"[bold green]{step_info.description}"):
        try:
            return func(*args, **kwargs)
        except Exception:
            if step_info.error_message:
                console.print(Text(step_info.error_message, style="red"), soft_wrap=True)
            raise


def display_error(message: str) -> None:
    """致命的エラーを表示します(パスなどを含むので折り返しもマークアップ解釈もしない)"""
    error_text = Text("エラー: ", style="bold red")
    error_text.append(message)
    console.print(error_text, soft_wrap=True)


def display_workspace(workspace: Workspace, dependencies: dict[str, list[str]]) -> None:
    """
    検出したパッケージの一覧を整形して表示します。
    """
    table = Table(title=f"Workspace ({len(workspace)} packages)", title_style="bold")
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("path")
    table.add_column("local dependencies")

    for name in sorted(workspace):
        package = workspace[name]
        table.add_row(Text(name), Text(package.path or "(root)"), Text(", ".join(dependencies.get(name, []))))

    console.print(Panel(table, title="monodiff", border_style="green"))
