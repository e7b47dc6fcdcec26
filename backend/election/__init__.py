"""Election Workflow Service - permissioned single-election voting workflow"""
