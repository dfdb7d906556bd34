"""create employee_records

Revision ID: a1f3c9e2d7b4
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9e2d7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

json_list = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'employee_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('emp_name', sa.String(length=255), nullable=False),
        sa.Column('emp_email', sa.String(length=255), nullable=False),
        sa.Column('emp_gender', sa.String(length=20), nullable=False),
        sa.Column('emp_marital_status', sa.String(length=20), nullable=False),
        sa.Column('emp_dob', sa.Date(), nullable=False),
        sa.Column('emp_mobile', sa.String(length=20), nullable=False),
        sa.Column('emp_alt_mobile', sa.String(length=20), nullable=True),
        sa.Column('emp_aadhaar', sa.String(length=20), nullable=False),
        sa.Column('emp_pan', sa.String(length=20), nullable=False),
        sa.Column('emp_address', sa.Text(), nullable=False),
        sa.Column('emp_city', sa.String(length=100), nullable=False),
        sa.Column('emp_state', sa.String(length=100), nullable=False),
        sa.Column('emp_zipcode', sa.String(length=20), nullable=False),
        sa.Column('emp_bank', sa.String(length=255), nullable=False),
        sa.Column('emp_account', sa.String(length=50), nullable=False),
        sa.Column('emp_ifsc', sa.String(length=20), nullable=False),
        sa.Column('emp_bank_branch', sa.String(length=100), nullable=True),
        sa.Column('emp_job_role', sa.String(length=255), nullable=False),
        sa.Column('emp_department', sa.String(length=255), nullable=False),
        sa.Column('emp_experience_status', sa.String(length=20), nullable=False),
        sa.Column('emp_joining_date', sa.Date(), nullable=False),
        sa.Column('emp_profile_pic', sa.String(length=255), nullable=True),
        sa.Column('emp_ssc_doc', sa.String(length=255), nullable=True),
        sa.Column('ssc_school', sa.String(length=255), nullable=False),
        sa.Column('ssc_year', sa.Integer(), nullable=False),
        sa.Column('ssc_grade', sa.String(length=20), nullable=False),
        sa.Column('emp_inter_doc', sa.String(length=255), nullable=True),
        sa.Column('inter_college', sa.String(length=255), nullable=False),
        sa.Column('inter_year', sa.Integer(), nullable=False),
        sa.Column('inter_grade', sa.String(length=20), nullable=False),
        sa.Column('inter_branch', sa.String(length=100), nullable=True),
        sa.Column('emp_grad_doc', sa.String(length=255), nullable=True),
        sa.Column('grad_college', sa.String(length=255), nullable=False),
        sa.Column('grad_year', sa.Integer(), nullable=False),
        sa.Column('grad_grade', sa.String(length=20), nullable=False),
        sa.Column('grad_degree', sa.String(length=100), nullable=False),
        sa.Column('grad_branch', sa.String(length=100), nullable=True),
        sa.Column('resume', sa.String(length=255), nullable=True),
        sa.Column('id_proof', sa.String(length=255), nullable=True),
        sa.Column('signed_document', sa.String(length=255), nullable=True),
        sa.Column('emp_terms_accepted', sa.Boolean(), nullable=False),
        sa.Column('primary_contact_name', sa.String(length=255), nullable=False),
        sa.Column('primary_contact_mobile', sa.String(length=20), nullable=False),
        sa.Column('primary_contact_relation', sa.String(length=50), nullable=False),
        sa.Column('primary_contact_email', sa.String(length=255), nullable=True),
        sa.Column('secondary_contact_name', sa.String(length=255), nullable=True),
        sa.Column('secondary_contact_mobile', sa.String(length=20), nullable=True),
        sa.Column('secondary_contact_relation', sa.String(length=50), nullable=True),
        sa.Column('secondary_contact_email', sa.String(length=255), nullable=True),
        sa.Column('previous_employments', json_list, nullable=True),
        sa.Column('additional_educations', json_list, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('emp_email', name='uq_employee_records_emp_email'),
        sa.UniqueConstraint('emp_aadhaar', name='uq_employee_records_emp_aadhaar'),
        sa.UniqueConstraint('emp_pan', name='uq_employee_records_emp_pan'),
    )
    op.create_index('ix_employee_records_created_at', 'employee_records', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_employee_records_created_at', table_name='employee_records')
    op.drop_table('employee_records')
