from gradebook_viewer.io import read_table
from gradebook_viewer.roster import Roster, build_roster

SAMPLE_HEADER = [
    "LastName",
    "FirstName",
    "ID",
    "SIS User ID",
    "SIS Login ID",
    "Section",
    "Quiz 1",
    "Lab 1",
    "Midterm Exam",
    "Case Study Final",
    "Reflection Essay",
    "Case Study Final Score",
    "Final Score",
    "Unposted Final Score",
    "Final Grade",
    "Unposted Final Grade",
]

# An LMS export as it arrives: points possible row, the LMS test student, a
# repeated header line, a duplicated student and a whitespace-only line.
SAMPLE_ROWS = [
    "    Points Possible,,,,,,10,50,100,100,10,(read only),(read only),(read only),(read only),(read only)",
    "Student,Test,9999,,test.student,S1,5,25,50,50,5,,50.00,50.00,0.5,0.5",
    "Doe,Jane,1001,SIS-1001,jdoe,S1,8,45,90,80,10,,86.14,86.14,3.0,3.0",
    "Smith,Adam,1002,SIS-1002,asmith,S2,4,20,50,40,,,43.00,43.00,0.0,0.0",
    ",".join(SAMPLE_HEADER),
    "Brown,Cara,1003,SIS-1003,cbrown,S1,10,50,,95,7,95.5,90.00,90.00,3.5,3.5",
    "Doe,Jane,1001,SIS-1001,jdoe,S1,0,0,0,0,0,,0,0,0.0,0.0",
    " , , , , , , , , , , , , , , , ",
]

SAMPLE_CSV = "\n".join([",".join(SAMPLE_HEADER)] + SAMPLE_ROWS) + "\n"


def load_sample_text() -> str:
    return SAMPLE_CSV


def load_sample_roster() -> Roster:
    return build_roster(read_table(SAMPLE_CSV))
