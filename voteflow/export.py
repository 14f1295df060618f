import csv
import io
from pathlib import Path
from typing import Iterable, Union

from voteflow.models import Proposal

DEFAULT_CSV_FILENAME = "voting_results.csv"
CSV_HEADER = ("Proposal Name", "Vote Count")


def proposals_to_csv(proposals: Iterable[Proposal]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for p in proposals:
        writer.writerow((p.name, str(p.vote_count)))
    return buf.getvalue().rstrip("\n")


def write_csv(path: Union[str, Path], proposals: Iterable[Proposal]) -> Path:
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(proposals_to_csv(proposals), encoding="utf-8")
    return target
