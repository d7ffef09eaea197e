#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from concurrent.futures import Executor, Future

import concurrent.futures
import threading

from confluentcloud_acl.config.logging import ACL_LOG

STOP_FLAG = threading.Event()


def handle_signals(pid, frame):
    ACL_LOG.warning(f"Received signal {pid} to stop. Cancelling pending changes")
    STOP_FLAG.set()


def waiting_on_futures(
    executor: Executor,
    futures_to_data: list[Future] | dict[Future, Any],
    resource_type: str,
    job_type: str,
) -> None:
    """
    Waits for all futures to complete. If the stop flag is set, cancels the futures
    which did not start yet and returns.
    """
    _pending = len(futures_to_data)
    ACL_LOG.debug("{}: {} to process: {}".format(resource_type, job_type, _pending))
    while _pending > 0:
        if STOP_FLAG.is_set():
            for _future in futures_to_data:
                _future.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            return
        _, other = concurrent.futures.wait(futures_to_data, timeout=5)
        _pending = len([_f for _f in other if not _f.done()])
        ACL_LOG.debug("%s: %s pending: %s" % (resource_type, job_type, _pending))
