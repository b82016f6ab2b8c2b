from datetime import time, timedelta

import mysql.connector
from mysql.connector import errorcode

from src.payroll_engine.payroll_engine.database.mysql_base import is_duplicate_key, normalize_mysql_time


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(22, 0)) == time(22, 0)
    assert normalize_mysql_time(timedelta(hours=21, minutes=30)) == time(21, 30)
    assert normalize_mysql_time("08:15:30") == time(8, 15, 30)


def test_duplicate_key_detection():
    assert is_duplicate_key(mysql.connector.IntegrityError(msg="dup", errno=errorcode.ER_DUP_ENTRY))
    assert not is_duplicate_key(mysql.connector.IntegrityError(msg="fk", errno=errorcode.ER_NO_REFERENCED_ROW_2))
