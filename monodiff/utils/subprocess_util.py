import shlex
import subprocess
from typing import Any

from monodiff.utils.log_util import log


class SubprocessUtil:
    CalledProcessError = subprocess.CalledProcessError

    @staticmethod
    def join(args: list[str]) -> str:
        """
        引数のリストをログ表示用のコマンド文字列に変換します。

        引数:
            args (list[str]): コマンド引数のリスト。

        戻り値:
            str: シェル向けにクオートされたコマンド文字列。
        """
        return shlex.join(args)

    @staticmethod
    def run(
        args: list[str],
        *,
        merge_stderr: bool = False,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """
        サブプロセスでコマンドを実行し、出力をUTF-8の文字列としてキャプチャします(シェルは経由しない)。

        引数:
            args (list[str]): 実行するコマンド。
            merge_stderr (bool): Trueの場合、stderrをstdoutに合流させてキャプチャします。
                Falseの場合はstdoutとstderrを別々にキャプチャします。
            check (bool): Trueの場合、終了コードが0以外ならCalledProcessErrorを発生させます。

        戻り値:
            subprocess.CompletedProcess: CompletedProcessインスタンス。

        例外:
            subprocess.CalledProcessError: checkがTrueで、プロセスが非ゼロの終了ステータスを返した場合。
            FileNotFoundError: コマンドが見つからない場合。
        """
        kwargs: dict[str, Any] = {
            "args": args,
            "text": True,
            "encoding": "utf-8",
            "errors": "replace",  # 不正なバイト列でもパスの一覧は読めるようにする
        }
        if merge_stderr:
            kwargs["stdout"] = subprocess.PIPE
            kwargs["stderr"] = subprocess.STDOUT
        else:
            kwargs["capture_output"] = True

        log("run command= %s", SubprocessUtil.join(args))
        # Avoid W1510: https://pylint.readthedocs.io/en/latest/user_guide/messages/warning/subprocess-run-check.html
        return subprocess.run(**kwargs, check=check)  # noqa: S603
