"""Push unpushed entries to Jira and merge the new worklog ids back."""

import asyncio
import json

from clients import ApiError, JiraClient, WorklogCall
from models import PushRequest, PushResponse, Record
from store import RecordStore


def build_requests(records: list[Record]) -> list[PushRequest]:
    """One request per record without a remote id, keeping its row index."""
    return [
        PushRequest(
            row_idx=r.index,
            ticket=r.ticket,
            time_spent=r.time_spent,
            comment=r.comment,
            started=r.started_ts,
        )
        for r in records
        if not r.is_pushed
    ]


def response_from_json(row_idx: int, data: dict) -> PushResponse:
    """Map a created-worklog answer onto a PushResponse."""
    if not isinstance(data, dict):
        return PushResponse(row_idx=row_idx, is_success=False, error="Answer is not a JSON object")
    worklog_id = str(data.get("id") or "")
    if not worklog_id:
        return PushResponse(row_idx=row_idx, is_success=False, error="Answer carries no worklog id")
    return PushResponse(
        row_idx=row_idx,
        is_success=True,
        id=worklog_id,
        issue_id=str(data.get("issueId") or ""),
        time_spent=data.get("timeSpent", ""),
        comment=data.get("comment", ""),
        started=data.get("started", ""),
    )


def preview(client: JiraClient, requests: list[PushRequest]) -> list[WorklogCall]:
    """Show the calls a push would make, without sending anything."""
    calls = [client.build_call(r) for r in requests]

    print(f"[PREVIEW] Jira server: {client.host or '(no host configured)'}")
    print(f"[PREVIEW] Would POST {len(calls)} worklogs:")
    for call in calls:
        print()
        print(f"    {call.method} {call.url}")
        print(f"    {json.dumps(call.body, ensure_ascii=False)}")
    print()
    print(f"Total requests: {len(calls)}")
    return calls


async def _send(client: JiraClient, request: PushRequest) -> PushResponse:
    try:
        data = await asyncio.to_thread(client.add_worklog, request)
    except (ApiError, ValueError) as e:
        print(f"    [!] {request.ticket} ({request.time_spent}, {request.started}): {e}")
        return PushResponse(row_idx=request.row_idx, is_success=False, error=str(e))
    return response_from_json(request.row_idx, data)


async def dispatch(client: JiraClient, requests: list[PushRequest]) -> list[PushResponse]:
    """Send all requests concurrently and wait for every one of them.

    A failed call yields an unsuccessful response, the others still run.
    """
    tasks = [asyncio.create_task(_send(client, r)) for r in requests]
    return list(await asyncio.gather(*tasks))


def merge(
    responses: list[PushResponse],
    store: RecordStore,
    expected: int | None = None,
) -> int:
    """Write remote ids of successful responses into the matching records.

    Records keyed by row index; records that already carry an id are kept.

    Returns:
        Number of records that got an id.
    """
    if expected is not None and len(responses) != expected:
        print(f"[!] WARNING: Expected {expected} responses, got {len(responses)}")

    merged = 0
    for response in responses:
        if not response.is_success:
            continue
        if not 0 <= response.row_idx < len(store):
            print(f"[!] WARNING: No record at row {response.row_idx} for worklog {response.id}")
            continue

        record = store.records[response.row_idx]
        if record.is_pushed:
            if record.id != response.id:
                print(
                    f"[!] WARNING: Row {response.row_idx} already pushed as {record.id}, "
                    f"ignoring worklog {response.id}"
                )
            continue

        record.id = response.id
        merged += 1
    return merged


def push(store: RecordStore, client: JiraClient, preview_only: bool = False) -> list[PushResponse]:
    """Push every unpushed record of the store and save the ids that came back."""
    requests = build_requests(store.records)
    if not requests:
        print("[*] Nothing to push, all entries already have a worklog id.")
        return []

    if preview_only or not client.host:
        preview(client, requests)
        return []

    print(f"[*] Pushing {len(requests)} worklogs to {client.host}...")
    responses = asyncio.run(dispatch(client, requests))

    merged = merge(responses, store, expected=len(requests))
    if merged:
        store.write()
    print(f"[+] Pushed {merged}/{len(requests)} worklogs")

    failed = [r for r in responses if not r.is_success]
    if failed:
        print()
        print(f"[!] Failed to push {len(failed)} worklogs:")
        for response in failed:
            record = store.records[response.row_idx]
            print(f"    - {record.ticket} | {record.time_spent} | {record.started_ts}: {response.error}")
    return responses
