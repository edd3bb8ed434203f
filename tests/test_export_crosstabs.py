import pandas as pd
from openpyxl import load_workbook

from export_crosstabs import main


def test_writes_workbook_for_builtin_dataset(tmp_path):
    path = tmp_path / "out.xlsx"
    code = main(["--dataset", "attrition", "-i", "department", "overtime",
                 "-d", "attrition", "-o", str(path), "--log-level", "WARNING"])
    assert code == 0
    assert load_workbook(path).sheetnames == ["attritiondepartment", "attritionovertime"]


def test_csv_source(tmp_path):
    src = tmp_path / "in.csv"
    pd.DataFrame({"q1": ["a", "b", "a"], "q2": ["x", "x", "y"]}).to_csv(src, index=False)
    path = tmp_path / "out.xlsx"
    code = main(["--csv", str(src), "-i", "q1", "-d", "q2", "-o", str(path), "--log-level", "WARNING"])
    assert code == 0
    assert load_workbook(path).sheetnames == ["q2q1"]


def test_missing_column_fails_cleanly(tmp_path):
    path = tmp_path / "out.xlsx"
    code = main(["--dataset", "attrition", "-i", "nope", "-d", "attrition",
                 "-o", str(path), "--log-level", "CRITICAL"])
    assert code == 1
