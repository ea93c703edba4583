import asyncio
import datetime
import functools
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Any,
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from postpone.logging.config.logging_config import LoggingConfig
from postpone.logging.config.stream_type import StreamType
from postpone.logging.models import Entry, Log, LogLevel

T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        models: dict[
            str,
            tuple[
                type[T],
                dict[str, Any],
            ]
        ] | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._streams: Dict[StreamType, io.TextIOBase] = {}
        self._borrowed: set[StreamType] = set()

        self._files: Dict[str, io.FileIO] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False
        self._queue: asyncio.Queue[asyncio.Future] = asyncio.Queue()

        self._models: Dict[str, tuple[type[Entry], dict[str, Any]]] = {}

        if models is None:
            models = {}

        for model_name, config in models.items():
            model, defaults = config

            self._models[model_name] = (
                model,
                defaults,
            )

        self._models.setdefault(
            'default',
            (
                Entry,
                {
                    'level': LogLevel.INFO,
                },
            ),
        )

    @property
    def name(self):
        return self._name

    @property
    def initialized(self):
        return self._initialized

    def _bind_loop(self):
        loop = asyncio.get_running_loop()
        if self._loop is loop:
            return

        # Locks and the queue belong to the loop they were first used on.
        self._loop = loop
        self._init_lock = asyncio.Lock()
        self._file_locks = defaultdict(asyncio.Lock)
        self._queue = asyncio.Queue()

    async def initialize(self):
        self._bind_loop()

        async with self._init_lock:
            if self._initialized:
                return

            for stream_type, source in (
                (StreamType.STDOUT, sys.stdout),
                (StreamType.STDERR, sys.stderr),
            ):
                stream = self._streams.get(stream_type)
                if stream is None or stream.closed:
                    await self._open_stream(stream_type, source)

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        self._bind_loop()

        if self._cwd is None:
            self._cwd = await self._loop.run_in_executor(
                None,
                os.getcwd,
            )

        logfile_path = self._to_logfile_path(filename, directory=directory)
        await self._open_logfile(logfile_path)

        if is_default:
            self._default_logfile_path = logfile_path

    async def _open_logfile(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

    def _open_file(
        self,
        logfile_path: str,
    ):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._files[logfile_path] = open(str(resolved_path), "ab+")

    async def close(self):
        self._bind_loop()

        while not self._queue.empty():
            task = self._queue.get_nowait()
            await task

        await asyncio.gather(
            *[self._close_file(logfile_path) for logfile_path in self._files]
        )

        for stream_type, stream in self._streams.items():
            if stream.closed is False:
                stream.flush()

                if stream_type not in self._borrowed:
                    stream.close()

        self._streams.clear()
        self._borrowed.clear()
        self._initialized = False

    def abort(self):
        for logfile in self._files.values():
            if logfile.closed is False:
                logfile.close()

        for stream_type, stream in self._streams.items():
            if stream.closed is False and stream_type not in self._borrowed:
                stream.close()

        while not self._queue.empty():
            task = self._queue.get_nowait()
            task.cancel()

        self._streams.clear()
        self._borrowed.clear()
        self._initialized = False

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        if filename_path.suffix != ".json":
            raise ValueError(
                f"Err. - logfile {filename} must be a JSON file."
            )

        if self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory = self._cwd

        return os.path.join(directory, filename_path)

    async def _open_stream(
        self,
        stream_type: StreamType,
        source: io.TextIOBase,
    ):
        try:
            self._streams[stream_type] = await self._dup_stream(source)
            self._borrowed.discard(stream_type)

        except (OSError, ValueError):
            # Captured or detached std streams have no descriptor to duplicate.
            self._streams[stream_type] = source
            self._borrowed.add(stream_type)

    async def _dup_stream(self, stream: io.TextIOBase):
        fileno = await self._loop.run_in_executor(
            None,
            stream.fileno,
        )

        duplicate = await self._loop.run_in_executor(
            None,
            os.dup,
            fileno,
        )

        return await self._loop.run_in_executor(
            None,
            functools.partial(
                os.fdopen,
                duplicate,
                mode="w",
            )
        )

    def schedule(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
    ):
        self._bind_loop()
        self._queue.put_nowait(
            asyncio.ensure_future(
                self.log(
                    entry,
                    template=template,
                    path=path,
                )
            )
        )

    async def log_prepared(
        self,
        message: str,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = self._to_entry(message, name)

        await self.log(
            entry,
            template=template,
            path=path,
            filter=filter,
        )

    async def log(
        self,
        entry: T | Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

        if template is None:
            template = self._default_template

        if filename is None:
            filename = self._default_logfile

        if directory is None:
            directory = self._default_log_directory

        if filename or directory or self._default_logfile_path:
            await self._log_to_file(
                entry,
                filename=filename,
                directory=directory,
                filter=filter,
            )

        else:
            await self._log(
                entry,
                template=template,
                filter=filter,
            )

    def _to_entry(
        self,
        message: str,
        name: str,
    ):
        model, defaults = self._models.get(
            name,
            self._models['default'],
        )

        return model(
            message=message,
            **defaults,
        )

    async def _log(
        self,
        entry_or_log: T | Log[T],
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if isinstance(entry_or_log, Log):
            entry = entry_or_log.entry

        else:
            entry = entry_or_log

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        self._bind_loop()

        if self._initialized is False:
            await self.initialize()

        stream = self._streams[self._config.output]

        if stream.closed:
            return

        if template is None:
            template = DEFAULT_TEMPLATE

        if isinstance(entry_or_log, Log):
            log_file = entry_or_log.filename
            line_number = entry_or_log.line_number
            function_name = entry_or_log.function_name

        else:
            log_file, line_number, function_name = self._find_caller()

        context = {
            "filename": log_file,
            "function_name": function_name,
            "line_number": line_number,
            "thread_id": threading.get_native_id(),
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
        }

        try:
            await self._loop.run_in_executor(
                None,
                self._write_line,
                stream,
                entry.to_template(template, context=context),
            )

        except (OSError, ValueError, KeyError) as err:
            stderr = self._streams.get(StreamType.STDERR)

            if stderr and stderr.closed is False:
                await self._loop.run_in_executor(
                    None,
                    self._write_line,
                    stderr,
                    entry.to_template(
                        ERROR_TEMPLATE,
                        context={
                            **context,
                            "error": str(err),
                        },
                    ),
                )

    def _write_line(self, stream: io.TextIOBase, line: str):
        stream.write(line + "\n")
        stream.flush()

    async def _log_to_file(
        self,
        entry_or_log: T | Log[T],
        filename: str | None = None,
        directory: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if isinstance(entry_or_log, Log):
            entry = entry_or_log.entry

        else:
            entry = entry_or_log

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        self._bind_loop()

        if self._cwd is None:
            self._cwd = await self._loop.run_in_executor(
                None,
                os.getcwd,
            )

        if filename is None and self._default_logfile_path:
            logfile_path = self._default_logfile_path

        else:
            logfile_path = self._to_logfile_path(
                filename or "logs.json",
                directory=directory or os.path.join(self._cwd, "logs"),
            )

        if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
            await self._open_logfile(logfile_path)

        if isinstance(entry_or_log, Log):
            log = entry_or_log

        else:
            log_file, line_number, function_name = self._find_caller()

            log = Log(
                entry=entry,
                filename=log_file,
                function_name=function_name,
                line_number=line_number,
            )

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._write_to_file,
                log,
                logfile_path,
            )

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(3)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )
