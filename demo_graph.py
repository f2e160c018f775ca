#!/usr/bin/env python3
"""
Demo: flat records -> ArrayFacade operators -> forest -> YAML.

Shows the workflow:
1. Wrap the example org chart records
2. Query them with path shorthands
3. Build the management forest and analyze it
4. Group the example catalog by category object
"""

from arrayfacade import ArrayFacade, analyze_graph
from arrayfacade.examples import build_example_org_chart, build_example_catalog
from arrayfacade.serialization import facade_to_yaml


def main():
    records = ArrayFacade.of(build_example_org_chart())

    print("=" * 70)
    print("ARRAYFACADE DEMO")
    print("=" * 70)

    # =========================================================================
    # STEP 1: Query
    # =========================================================================
    print("\n1. QUERYING RECORDS...")
    print(f"   Records:            {records.count()}")
    print(f"   Departments:        {records.group_by('dept').keys().join(', ')}")
    print(f"   Payroll:            {records.sum_by('salary').get()}")
    print(f"   Lowest paid:        {records.min_by('salary').get()['name']}")
    print(f"   Engineering heads:  {records.filter({'dept': 'Engineering', 'parent': None}).map('name').join(', ')}")

    # =========================================================================
    # STEP 2: Build forest
    # =========================================================================
    print("\n2. BUILDING FOREST...")
    forest = records.sort_by('id').to_graph('id', 'parent', 'children')
    report = analyze_graph(forest)
    print(f"   Roots:              {report.root_count}")
    print(f"   Nodes:              {report.total_nodes}")
    print(f"   Max depth:          {report.max_depth}")
    print(f"   Leaves:             {len(report.leaf_ids)}")
    for warning in report.warnings:
        print(f"   ! {warning}")

    # =========================================================================
    # STEP 3: Group by object
    # =========================================================================
    print("\n3. GROUPING CATALOG BY CATEGORY...")
    grouped = ArrayFacade.of(build_example_catalog()).group_by_object('category', 'id', 'products')
    print(facade_to_yaml(grouped))


if __name__ == "__main__":
    main()
